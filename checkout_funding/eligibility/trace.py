"""Eligibility trace log — one entry per rendered button.

Owned by a CheckoutContext, append-only until reset. Rendering is a plain
text table; callers needing structured output use rows().
"""

from __future__ import annotations

import json
import logging

from checkout_funding.schemas.funding import ButtonTrace

logger = logging.getLogger(__name__)

_COLUMNS = ("Funding", "Reason", "Eligibility", "Factors")


class EligibilityTrace:
    """Accumulated per-button eligibility reasons."""

    def __init__(self) -> None:
        self._buttons: list[ButtonTrace] = []

    def __len__(self) -> int:
        return len(self._buttons)

    @property
    def buttons(self) -> list[ButtonTrace]:
        return list(self._buttons)

    def record(self, button: ButtonTrace) -> None:
        """Append the reasons for one button render."""
        self._buttons.append(button)

    def reset(self) -> None:
        self._buttons.clear()

    def rows(self) -> list[list[dict[str, str]]]:
        """Table rows per button, keyed by column name."""
        return [_button_rows(button) for button in self._buttons]

    def render(self) -> str:
        """Render every recorded button as a text table."""
        blocks = [
            f"Button {index}:\n\n{_format_table(rows)}"
            for index, rows in enumerate(self.rows(), start=1)
        ]
        return "\n\n".join(blocks)

    def dump(self) -> str:
        """Render the trace and write it to the log."""
        text = self.render()
        if not text:
            logger.info("No funding eligibility recorded")
            return text
        logger.info("Funding eligibility for %d button(s):\n%s", len(self._buttons), text)
        return text


def _button_rows(button: ButtonTrace) -> list[dict[str, str]]:
    return [
        {
            "Funding": source,
            "Reason": record.reason.value,
            "Eligibility": "eligible" if record.eligible else "ineligible",
            "Factors": json.dumps(record.factors.model_dump(mode="json"), sort_keys=True),
        }
        for source, record in button.reasons.items()
    ]


def _format_table(rows: list[dict[str, str]]) -> str:
    widths = {col: max([len(col)] + [len(row[col]) for row in rows]) for col in _COLUMNS}
    header = " | ".join(col.ljust(widths[col]) for col in _COLUMNS)
    divider = "-+-".join("-" * widths[col] for col in _COLUMNS)
    lines = [header, divider]
    lines.extend(" | ".join(row[col].ljust(widths[col]) for col in _COLUMNS) for row in rows)
    return "\n".join(line.rstrip() for line in lines)
