import logging
import os
import traceback

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger("django.request")

BODY_SAMPLE_BYTES = 2048


class VerboseExceptionLoggingMiddleware(MiddlewareMixin):
    """
    Captures any unhandled exception raised by an admin endpoint and logs the
    full traceback with request context (path, method, query string, a sample
    of the JSON body), then lets Django surface the 500.
    Active only if ENABLE_VERBOSE_ERRORS=true in env.
    """

    def process_exception(self, request, exception):
        if os.getenv("ENABLE_VERBOSE_ERRORS", "").lower() not in {"1", "true", "yes"}:
            return None
        try:
            get_params = dict(request.GET.items()) if request.GET else {}
            body_sample = request.body[:BODY_SAMPLE_BYTES].decode("utf-8", "replace")
        except Exception:
            get_params, body_sample = {}, ""
        logger.error(
            "EXC in %s %s | exc=%s\nGET=%s\nBODY(sample)=%s\nTRACEBACK:\n%s",
            request.method,
            request.path,
            repr(exception),
            get_params,
            body_sample,
            "".join(traceback.format_exception(type(exception), exception, exception.__traceback__)),
        )
        # Return None to continue normal exception handling (and surface a 500)
        return None
