"""Shared fixtures: a call-recording stand-in for the Stirling PDF client."""

import base64

import pytest

PDF_BYTES = b"%PDF-1.7\n1 0 obj\n<<>>\nendobj\n%%EOF\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def pdf_data_url(content: bytes = PDF_BYTES) -> str:
    return f"data:application/pdf;base64,{base64.b64encode(content).decode()}"


def image_data_url(content: bytes = PNG_BYTES, subtype: str = "png") -> str:
    return f"data:image/{subtype};base64,{base64.b64encode(content).decode()}"


class StubClient:
    """Records every call instead of talking to the network."""

    def __init__(self, response: bytes = b"%PDF-1.7 result", error: Exception = None):
        self.response = response
        self.error = error
        self.calls = []

    async def call(self, endpoint, request, ctx=None):
        self.calls.append((endpoint, request))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def stub_client():
    return StubClient()
