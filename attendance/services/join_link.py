"""Join links that route a student to one session's claim form."""
import io
from urllib.parse import unquote, urlsplit

import qrcode
from qrcode.image.svg import SvgImage

from attendance.core.constants import JOIN_PATH_SEGMENT


def build_join_link(base_url: str, session_id: str) -> str:
    """Embed ``session_id`` verbatim as the last path segment of the link."""
    return f"{base_url.rstrip('/')}/{JOIN_PATH_SEGMENT}/{session_id}"


def extract_session_id(link_or_token: str) -> str:
    """
    Recover the session id from a join link.

    Accepts a full URL, a bare ``/attend/<id>`` path, or the id itself, so
    ``extract_session_id(build_join_link(base, sid)) == sid``.

    Raises:
        ValueError: If no session id can be found
    """
    value = (link_or_token or "").strip()
    path = urlsplit(value).path if "://" in value else value
    segments = [unquote(s) for s in path.split("/") if s]

    if not segments:
        raise ValueError("Join link does not contain a session id")

    if JOIN_PATH_SEGMENT in segments:
        index = len(segments) - 1 - segments[::-1].index(JOIN_PATH_SEGMENT)
        if index + 1 >= len(segments):
            raise ValueError("Join link does not contain a session id")
        return segments[index + 1]

    if len(segments) == 1:
        return segments[0]

    raise ValueError("Join link does not contain a session id")


def render_join_qr(join_link: str) -> io.BytesIO:
    """Render the join link as an SVG QR code the instructor can project."""
    qr = qrcode.QRCode(
        version=None,  # grow to fit the link length
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(join_link)
    qr.make(fit=True)

    img = qr.make_image(image_factory=SvgImage)

    buffer = io.BytesIO()
    img.save(buffer)
    buffer.seek(0)
    return buffer
