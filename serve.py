"""HTTP server exposing the text2stitch pipeline.

- GET  /api/options:     Enumerated choices for font size, family, spacing, fabric
- POST /api/pattern:     Generate a pattern, respond with report JSON + base64 PNG
- POST /api/pattern.png: Generate a pattern, respond with the PNG itself
- POST /api/pattern.pdf: Generate a pattern, respond with the two-page PDF

Each request runs the pipeline synchronously; a semaphore keeps it to one
generation at a time.
"""

import io
import logging
import sys
import threading
import time
from http.server import BaseHTTPRequestHandler, HTTPServer

from server_utils import (
    ALLOWED_ORIGINS,
    bytes_response,
    json_error,
    json_response,
    pattern_options,
    read_json_body,
    result_payload,
    validate_pattern_params,
)
from text2stitch.config import PDF_FILENAME
from text2stitch.errors import PatternTooLargeError
from text2stitch.export import png_filename
from text2stitch.pipeline import PatternSession

logger = logging.getLogger("text2stitch.server")

_generate_semaphore = threading.Semaphore(1)


class PatternServerHandler(BaseHTTPRequestHandler):
    """HTTP handler for pattern generation and export."""

    def end_headers(self):
        self.send_header("X-Content-Type-Options", "nosniff")
        self.send_header("Referrer-Policy", "strict-origin-when-cross-origin")
        super().end_headers()

    def do_GET(self):
        if self.path == "/api/options":
            json_response(self, pattern_options())
        else:
            json_error(self, "Not Found", 404)

    def do_POST(self):
        if self.path == "/api/pattern":
            self._handle_pattern("json")
        elif self.path == "/api/pattern.png":
            self._handle_pattern("png")
        elif self.path == "/api/pattern.pdf":
            self._handle_pattern("pdf")
        else:
            json_error(self, "Not Found", 404)

    def _handle_pattern(self, kind: str):
        body = read_json_body(self)
        if body is None:
            return

        request, error = validate_pattern_params(body)
        if error:
            logger.warning("Rejected pattern request from %s: %s", self.client_address[0], error)
            json_error(self, error, 400)
            return

        if not _generate_semaphore.acquire(timeout=10):
            json_error(self, "Server busy, try again later", 503)
            return
        try:
            t0 = time.monotonic()
            session = PatternSession()
            result = session.generate(request)
            self.log_message(
                "Generated: %d line(s) %s/%s (%.2fs, %d stitches)",
                len(result.lines),
                request.font_size,
                request.family_key,
                time.monotonic() - t0,
                result.stitch_count,
            )

            if kind == "json":
                json_response(self, result_payload(result))
                return
            if not session.has_pattern:
                json_error(self, "No text to stitch", 422)
                return

            buf = io.BytesIO()
            if kind == "png":
                name = session.export_png(stream=buf)
                content_type = "image/png"
            else:
                name = session.export_pdf(stream=buf)
                content_type = "application/pdf"
            bytes_response(
                self,
                buf.getvalue(),
                content_type,
                headers={"Content-Disposition": f'attachment; filename="{name}"'},
            )
        except PatternTooLargeError as e:
            json_error(self, str(e), 413)
        except Exception:
            logger.exception("Pattern generation failed")
            json_error(self, "Internal server error", 500)
        finally:
            _generate_semaphore.release()

    def do_OPTIONS(self):
        """Handle CORS preflight requests."""
        self.send_response(204)
        origin = self.headers.get("Origin", "")
        if origin in ALLOWED_ORIGINS:
            self.send_header("Access-Control-Allow-Origin", origin)
            self.send_header("Vary", "Origin")
        self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type")
        self.end_headers()

    def log_message(self, fmt, *args):
        sys.stderr.write(f"[serve] {fmt % args}\n")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    port = int(sys.argv[1]) if len(sys.argv) > 1 else 8042
    server = HTTPServer(("127.0.0.1", port), PatternServerHandler)
    print(f"text2stitch server on http://127.0.0.1:{port}")
    print(f"Downloads:  {png_filename(False)}, {png_filename(True)}, {PDF_FILENAME}")
    print("Press Ctrl+C to stop\n")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down.")
        server.server_close()


if __name__ == "__main__":
    main()
