import contextvars

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
principal_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "principal_id", default=None
)
