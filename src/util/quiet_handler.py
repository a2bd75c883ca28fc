from wsgiref.simple_server import WSGIRequestHandler
from src.util.logger import log

class QuietHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        log(f"{self.address_string()} {format % args}", "DEBUG")
