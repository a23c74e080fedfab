"""
Service context for log lines.

Identifies the running process so log lines from several workers behind the
same load balancer can be told apart.
"""

import os
from functools import lru_cache
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'conference-central')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostnames are short ids; fall back to the pid on bare hosts
    instance_id = os.getenv('HOSTNAME') or socket.gethostname() or 'local'
    return f'{service_name}@{deploy_env}:{instance_id[:12]}:{os.getpid()}'
