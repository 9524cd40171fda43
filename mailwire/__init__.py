"""Message building, form payloads, response parsing, paging and webhook checks for a transactional e-mail API."""

__version__ = "4.6.1"