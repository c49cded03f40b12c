"""User-agent based device check.

Venmo is only remembered for buyers on a mobile device.
"""

from __future__ import annotations

import re

_MOBILE_UA = re.compile(
    r"Android|webOS|iPhone|iPad|iPod|bada|Symbian|Palm|CriOS|BlackBerry|IEMobile|WindowsMobile|Opera Mini",
    re.IGNORECASE,
)


def is_device(user_agent: str | None) -> bool:
    """True if the user agent belongs to a phone or tablet."""
    if not user_agent:
        return False
    return _MOBILE_UA.search(user_agent) is not None
