"""Quality utilities: link normalization for extracted cards."""

from quality.urlnorm import card_link, strip_client_param

__all__ = ["card_link", "strip_client_param"]
