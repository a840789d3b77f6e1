"""Serve a form built from a control config file and re-populate it on submit.

Usage:
  PYTHONPATH=src python scripts/serve_form_example.py controls.toml --port 8000

GET `/` renders the controls in their initial state. Submitting the form
POSTs back to `/`, where every control is rebuilt from the posted values so
text fields keep what was typed and checkboxes/radios stay checked.
"""
from http.server import HTTPServer, BaseHTTPRequestHandler
import argparse
import html
import json
from pathlib import Path
from typing import Any, Optional

from formcontrols.config import load_settings, read_toml
from formcontrols.controls.input import Input
from formcontrols.controls.submission import MappingSubmission, SubmissionReader
from formcontrols.managers.datetime_sequence import DatetimeSequence
from formcontrols.utils.logging_config import setup_logging


def load_controls(path: Path) -> list[dict[str, Any]]:
    doc = read_toml(path) if path.suffix.lower() == '.toml' else json.loads(path.read_text(encoding='utf8'))
    if isinstance(doc, dict):
        doc = doc.get('controls', [doc])
    return [c for c in doc if isinstance(c, dict)]


def render_page(controls: list[dict[str, Any]], submission: Optional[SubmissionReader] = None) -> str:
    settings = load_settings()
    # one sequence per request keeps datetime slots starting at 0
    sequence = DatetimeSequence()

    parts = ['<html><head><meta charset="utf-8"><title>Form</title></head><body>']
    parts.append('<form method="post" action="/">')
    for tabindex, params in enumerate(controls, start=1):
        control = Input(params, submission=submission, sequence=sequence, settings=settings)
        parts.append(control.get_html(tabindex))
    parts.append(f'<div><button type="submit" name="{html.escape(settings.submit_marker)}">Submit</button></div>')
    parts.append('</form>')
    parts.append('</body></html>')
    return '\n'.join(parts)


class FormHandler(BaseHTTPRequestHandler):
    def __init__(self, *args, controls=None, **kwargs):
        self.controls = controls or []
        super().__init__(*args, **kwargs)

    def _send_page(self, body: str):
        self.send_response(200)
        self.send_header('Content-Type', 'text/html; charset=utf-8')
        self.end_headers()
        self.wfile.write(body.encode('utf-8'))

    def do_GET(self):
        if self.path != '/':
            self.send_response(404)
            self.end_headers()
            self.wfile.write(b'Not found')
            return
        self._send_page(render_page(self.controls))

    def do_POST(self):
        length = int(self.headers.get('Content-Length', 0))
        body = self.rfile.read(length).decode('utf-8')
        submission = MappingSubmission.from_query_string(body, submit_marker=load_settings().submit_marker)
        self._send_page(render_page(self.controls, submission))


def run_server(controls: list[dict[str, Any]], port: int = 8000):
    def handler(*args, **kwargs):
        return FormHandler(*args, controls=controls, **kwargs)

    server = HTTPServer(('127.0.0.1', port), handler)
    print(f"Serving {len(controls)} controls at http://127.0.0.1:{port}/")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print('Shutting down')
        server.server_close()


def main():
    p = argparse.ArgumentParser(description='Serve a form of controls and re-populate it on submit')
    p.add_argument('config', type=Path, help='TOML or JSON file with a "controls" array')
    p.add_argument('--port', type=int, default=8000, help='Port to serve on')
    args = p.parse_args()
    setup_logging()
    run_server(load_controls(args.config), port=args.port)


if __name__ == '__main__':
    main()
