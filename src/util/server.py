import falcon
import threading
from typing import Optional
from socketserver import ThreadingMixIn
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from wsgiref.simple_server import make_server, WSGIServer

from src.util.setup import load_settings, get_settings
from src.util.logger import log
from src.util.quiet_handler import QuietHandler
from src.services.kubernetes_services.namespace_service import NamespaceService
from src.services.namespace_lifecycle_service import NamespaceLifecycleService
from src.resources.namespace_resource import (
    CreateNamespaceResource,
    DeleteNamespaceResource,
    ListNamespacesResource,
    NamespaceInfoResource,
)


class ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class Server:
    def __init__(self):
        log("Starting server....")
        load_settings()
        self.settings = get_settings()
        self.shutdown_event = threading.Event()
        self.httpd = None

        # Instantiate core services
        self.init_kubernetes()
        lifecycle = self.settings['lifecycle']
        self.lifecycle_service = NamespaceLifecycleService(
            namespace_service=self.namespace_service,
            poll_interval=lifecycle['pollIntervalSeconds'],
            confirm_timeout=lifecycle['confirmTimeoutSeconds'],
            treat_errors_as_deleted=lifecycle['treatErrorsAsDeleted'],
        )

        self.app = create_app(self.lifecycle_service, self.shutdown_event)

    def run(self):
        host = self.settings['server']['host']
        port = self.settings['server']['port']
        log(f"Server starting on port {port}")
        try:
            with make_server(host, port, self.app, server_class=ThreadingWSGIServer, handler_class=QuietHandler) as httpd:
                self.httpd = httpd
                httpd.serve_forever()
        finally:
            self.httpd = None
            self.shutdown_event.set()

    def stop(self):
        self.shutdown_event.set()
        if self.httpd is not None:
            self.httpd.shutdown()

    def init_kubernetes(self):
        k8s = self.settings['k8s']
        self.config = client.Configuration()
        mode = k8s['mode']

        if mode in ('auto', 'incluster'):
            try:
                config.load_incluster_config(client_configuration=self.config)
                log("Using in-cluster config")
            except ConfigException as e:
                if mode == 'incluster':
                    raise
                log(f"In-cluster config unavailable ({e}), falling back to kubeconfig")
                mode = 'kubeconfig'

        if mode == 'kubeconfig':
            config.load_kube_config(config_file=k8s['configPath'], client_configuration=self.config)
            log(f"Using kubeconfig {k8s['configPath'] or '(default)'}")

        self.namespace_service = NamespaceService(config=self.config)


def create_app(lifecycle_service: NamespaceLifecycleService, shutdown_event: Optional[threading.Event] = None) -> falcon.App:
    app = falcon.App()
    app.add_route('/api/namespaces/create', CreateNamespaceResource(lifecycle_service))
    app.add_route('/api/namespaces/delete', DeleteNamespaceResource(lifecycle_service, shutdown_event))
    app.add_route('/api/namespaces/list', ListNamespacesResource(lifecycle_service))
    app.add_route('/api/namespaces/info', NamespaceInfoResource(lifecycle_service))
    return app
