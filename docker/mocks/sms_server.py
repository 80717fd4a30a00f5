"""
SMS Gateway Mock Server — accepts the bulk-SMS payload the notification service posts.
Numbers starting with '0' are rejected with 400; a missing authorization header gets 401.
Listens on port 8003.
"""

import json, uuid
from http.server import BaseHTTPRequestHandler, HTTPServer


class SMSHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        if self.path != "/send":
            self._respond(404, {"error": "Not found"})
            return
        if not self.headers.get("authorization"):
            self._respond(401, {"return": False, "message": "Missing API key"})
            return

        length = int(self.headers.get("Content-Length", 0))
        body   = json.loads(self.rfile.read(length) or b"{}")
        number = str(body.get("numbers", ""))

        if not number or number.startswith("0"):
            self._respond(400, {"return": False, "message": f"Invalid number: {number}"})
            return

        print(f"SMS -> {number}: {body.get('message', '')}")
        self._respond(200, {
            "return":     True,
            "request_id": uuid.uuid4().hex[:12],
            "message":    ["SMS sent successfully."],
        })

    def _respond(self, code, data):
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def log_message(self, *_):
        pass


if __name__ == "__main__":
    server = HTTPServer(("0.0.0.0", 8003), SMSHandler)
    print("SMS Mock running on :8003")
    server.serve_forever()
