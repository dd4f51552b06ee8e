import logging
import time
import uuid
from contextvars import ContextVar

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'

request_id_var: ContextVar[str] = ContextVar('request_id', default='-')


class RequestIdFilter(logging.Filter):
    """Добавляет request_id текущего запроса в каждую запись лога"""

    def filter(self, record):
        record.request_id = request_id_var.get()
        return True


class RequestLoggingMiddleware:
    """
    Присваивает запросу id (из X-Request-ID или новый) и пишет итог запроса в лог
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        start = time.monotonic()
        try:
            response = self.get_response(request)
            latency_ms = (time.monotonic() - start) * 1000
            response[REQUEST_ID_HEADER] = request_id

            log = logger.error if response.status_code >= 500 else logger.info
            log(
                "request completed method=%s uri=%s remote_ip=%s status=%s latency_ms=%.1f",
                request.method,
                request.get_full_path(),
                request.META.get('REMOTE_ADDR'),
                response.status_code,
                latency_ms,
            )
            return response
        finally:
            request_id_var.reset(token)
