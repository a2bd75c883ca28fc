import json
import threading
from typing import Optional
import falcon
from cerberus import Validator

from src.services.namespace_lifecycle_service import NamespaceLifecycleService
from src.util.errors import (
    DeleteCancelled,
    DeleteConfirmTimeout,
    GatewayConflict,
    GatewayError,
    GatewayNotFound,
    InvalidTTL,
    LifecycleError,
)
from src.util.logger import log

# 1000 years keeps expires_at well inside the datetime range
MAX_TTL_HOURS = 24 * 365 * 1000

def reject_boolean(field, value, error):
    if isinstance(value, bool):
        error(field, "must be an integer, not a boolean")

CREATE_SCHEMA = {
    'name':  {'type': 'string', 'required': True, 'empty': False},
    'ttl':   {'type': 'integer', 'required': True, 'min': 1, 'max': MAX_TTL_HOURS, 'check_with': reject_boolean},
    'owner': {'type': 'string', 'required': True, 'empty': False},
    'team':  {'type': 'string', 'required': True, 'empty': False},
}

DELETE_SCHEMA = {
    'name': {'type': 'string', 'required': True, 'empty': False},
}

# Helper functions
def parse_request_body(req):
    body_raw = req.bounded_stream.read()
    if not body_raw:
        log("Missing body in request", "ERROR")
        raise falcon.HTTPBadRequest(title='Bad request', description='Missing body')

    try:
        body = json.loads(body_raw)
    except json.JSONDecodeError as e:
        log(f"Invalid JSON: {str(e)}", "ERROR")
        raise falcon.HTTPBadRequest(title='Bad request', description=f'Invalid JSON: {str(e)}')

    if not isinstance(body, dict):
        raise falcon.HTTPBadRequest(title='Bad request', description='Body must be a JSON object')
    return body

def validate_body(body, schema):
    v = Validator(schema)
    v.allow_unknown = True
    if not v.validate(body):
        log(f"Invalid body: {v.errors}", "ERROR")
        raise falcon.HTTPBadRequest(title='Bad request', description=f'Invalid body: {v.errors}')

def set_response(resp, status, media):
    resp.status = status
    resp.media = media

def handle_error(resp, status, error_message, **extra):
    log(f"Error: {error_message}", "ERROR")
    resp.status = status
    resp.media = {"error": error_message, **extra}


class CreateNamespaceResource:
    def __init__(self, lifecycle_service: NamespaceLifecycleService):
        self.lifecycle_service = lifecycle_service

    def on_post(self, req, resp):
        log("POST /api/namespaces/create request", "DEBUG")
        body = parse_request_body(req)
        validate_body(body, CREATE_SCHEMA)

        try:
            self.lifecycle_service.create(body['name'], body['ttl'], body['owner'], body['team'])
        except InvalidTTL as e:
            handle_error(resp, falcon.HTTP_400, e.message)
            return
        except GatewayConflict as e:
            handle_error(resp, falcon.HTTP_409, e.message)
            return
        except GatewayError as e:
            handle_error(resp, falcon.HTTP_500, e.message)
            return

        set_response(resp, falcon.HTTP_201, {"message": "Namespace created successfully", "name": body['name']})


class ListNamespacesResource:
    def __init__(self, lifecycle_service: NamespaceLifecycleService):
        self.lifecycle_service = lifecycle_service

    def on_get(self, req, resp):
        owner = req.get_param('owner') or ""
        try:
            views = self.lifecycle_service.list_namespaces(owner)
        except GatewayError as e:
            handle_error(resp, falcon.HTTP_500, e.message)
            return

        set_response(resp, falcon.HTTP_200, [view.to_dict() for view in views])


class NamespaceInfoResource:
    def __init__(self, lifecycle_service: NamespaceLifecycleService):
        self.lifecycle_service = lifecycle_service

    def on_get(self, req, resp):
        name = req.get_param('name')
        if not name:
            raise falcon.HTTPBadRequest(title='Bad request', description='Missing required parameter: name')

        try:
            view = self.lifecycle_service.get_namespace(name)
        except GatewayNotFound as e:
            handle_error(resp, falcon.HTTP_404, e.message)
            return
        except GatewayError as e:
            handle_error(resp, falcon.HTTP_500, e.message)
            return

        set_response(resp, falcon.HTTP_200, view.to_dict())


class DeleteNamespaceResource:
    def __init__(self, lifecycle_service: NamespaceLifecycleService, shutdown_event: Optional[threading.Event] = None):
        self.lifecycle_service = lifecycle_service
        self.shutdown_event = shutdown_event

    def on_delete(self, req, resp):
        body = parse_request_body(req)
        validate_body(body, DELETE_SCHEMA)
        name = body['name']

        try:
            self.lifecycle_service.delete(name, cancel=self.shutdown_event)
        except DeleteConfirmTimeout as e:
            handle_error(resp, falcon.HTTP_504, e.message, state=e.state.value)
            return
        except DeleteCancelled as e:
            handle_error(resp, falcon.HTTP_503, e.message, state=e.state.value)
            return
        except LifecycleError as e:
            handle_error(resp, falcon.HTTP_500, e.message, state=e.state.value)
            return

        set_response(resp, falcon.HTTP_200, {"message": "Namespace deleted successfully", "name": name})
