"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class EmailDeliveryError(AdapterError):
    """Email transport rejected or failed to deliver a message."""

    pass


class EmailTemplateError(AdapterError):
    """Email template is missing or failed to render."""

    pass


class MessageChannelError(AdapterError):
    """Message channel publish or consume failure."""

    pass
