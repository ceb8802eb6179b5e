import html

import bleach
from rest_framework import serializers


def clean_text(v):
    """Strip markup and surrounding whitespace from user supplied text.

    ``bleach`` escapes ``&``, ``<`` and ``>`` in what remains; the API stores
    plain text, so the entities are turned back into characters.
    """
    return html.unescape(bleach.clean((v or '').strip(), tags=set(), strip=True))


class CleanCharField(serializers.CharField):
    """CharField whose value is sanitised with :func:`clean_text`."""

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))
