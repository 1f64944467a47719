"""
Rendering utilities for encoded QR symbols.

The module matrix produced by ``qrgrid.encoder`` is rendered here into
vector (SVG), raster (NumPy / PIL / PNG) and terminal text forms. All
renderers are pure functions of the module matrix plus a quiet-zone
margin and a module scale.

Functions
---------
to_svg
    SVG document with one rect per dark module.
to_data_url
    Base64 ``data:image/svg+xml`` URI of ``to_svg``.
generate_data_url
    Encode text and return its SVG data URI in one step.
to_text
    Block-character rendering for terminals.
save_qr_png
    Encode text and save it as a PNG.

Classes
-------
RenderOptions
    Immutable rendering configuration.
QRImage
    Raster renderer with optional OpenCV validation.

Notes
-----
OpenCV is optional and required only for decoding. If unavailable,
decoding raises RuntimeError.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
from PIL import Image

from . import config
from .encoder import QRCode, QROptions, encode

Color = tuple[int, int, int]  # (R, G, B)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
DATA_URL_PREFIX = "data:image/svg+xml;base64,"


@dataclass(frozen=True)
class RenderOptions:
    """
    Immutable rendering configuration.

    Parameters
    ----------
    margin : int, optional
        Width, in modules, of the quiet zone around the code. The
        default is 4, which is the minimum recommended by the QR
        standard.
    scale : int, optional
        Size, in pixels (or SVG user units), of each module. The
        default is 4.
    fg : Color, optional
        Raster color of dark modules. The default is black.
    bg : Color, optional
        Raster color of light modules and the quiet zone. The default
        is white.

    Raises
    ------
    ValueError
        If `margin` is negative or `scale` is less than 1.
    """

    margin: int = config.DEFAULT_MARGIN
    scale: int = config.DEFAULT_SCALE
    fg: Color = config.DEFAULT_COLOR_FG
    bg: Color = config.DEFAULT_COLOR_BG

    def __post_init__(self) -> None:
        if not isinstance(self.margin, int) or self.margin < 0:
            raise ValueError("'margin' must be a non-negative integer")
        if not isinstance(self.scale, int) or self.scale < 1:
            raise ValueError("'scale' must be a positive integer")

    def canvas_size(self, size: int) -> int:
        """Side length of the rendered canvas for a symbol of `size` modules."""
        return (size + 2 * self.margin) * self.scale


def _options(margin: Optional[int], scale: Optional[int]) -> RenderOptions:
    return RenderOptions(
        margin=config.DEFAULT_MARGIN if margin is None else margin,
        scale=config.DEFAULT_SCALE if scale is None else scale,
    )


# ---------- Vector ----------

def to_svg(qr: QRCode, *, margin: Optional[int] = None, scale: Optional[int] = None) -> str:
    """
    Render a symbol as an SVG document.

    The canvas is ``(size + 2 * margin) * scale`` units square, with a
    full-canvas light background rect and one dark rect of side `scale`
    per dark module, at ``((col + margin) * scale, (row + margin) * scale)``.

    Parameters
    ----------
    qr : QRCode
        Encoded symbol.
    margin : int, optional
        Quiet-zone width in modules. The default is 4.
    scale : int, optional
        Units per module. The default is 4.

    Returns
    -------
    str
        SVG markup.
    """
    opts = _options(margin, scale)
    total = opts.canvas_size(qr.size)
    step = opts.scale

    parts = [
        f'<svg xmlns="{SVG_NAMESPACE}" viewBox="0 0 {total} {total}" '
        f'width="{total}" height="{total}">',
        f'<rect width="{total}" height="{total}" fill="{config.SVG_COLOR_BG}"/>',
    ]
    for row, col in zip(*np.nonzero(qr.modules)):
        x = (int(col) + opts.margin) * step
        y = (int(row) + opts.margin) * step
        parts.append(
            f'<rect x="{x}" y="{y}" width="{step}" height="{step}" '
            f'fill="{config.SVG_COLOR_FG}"/>'
        )
    parts.append("</svg>")
    return "".join(parts)


def to_data_url(qr: QRCode, *, margin: Optional[int] = None, scale: Optional[int] = None) -> str:
    """Return the SVG rendering as a base64 data URI."""
    svg = to_svg(qr, margin=margin, scale=scale)
    return DATA_URL_PREFIX + base64.b64encode(svg.encode("utf-8")).decode("ascii")


def generate_data_url(
    text: str,
    options: Optional[QROptions] = None,
    *,
    margin: Optional[int] = None,
    scale: Optional[int] = None,
) -> str:
    """Encode `text` and return its SVG data URI."""
    return to_data_url(encode(text, options), margin=margin, scale=scale)


# ---------- Text ----------

def to_text(qr: QRCode, *, margin: int = config.DEFAULT_MARGIN) -> str:
    """
    Render a symbol with block characters, two per module.

    Dark modules are drawn as full blocks, so the output reads
    correctly on a light terminal background.
    """
    width = qr.size + 2 * margin
    blank = "  " * width
    lines: List[str] = [blank] * margin
    for row in qr.modules:
        body = "".join("██" if dark else "  " for dark in row)
        lines.append("  " * margin + body + "  " * margin)
    lines += [blank] * margin
    return "\n".join(lines)


# ---------- Raster ----------

class QRImage:
    """
    Raster renderer for an encoded symbol.

    Parameters
    ----------
    qr : QRCode
        Encoded symbol.
    options : RenderOptions, optional
        Margin, scale and colors. The default is ``RenderOptions()``.

    Attributes
    ----------
    qr : QRCode
        Symbol being rendered.
    options : RenderOptions
        Rendering configuration.
    pixel_shape : tuple of int
        Shape of the rendered image in pixels as (height, width),
        including the quiet-zone margin.
    """

    def __init__(self, qr: QRCode, options: Optional[RenderOptions] = None) -> None:
        self.qr = qr
        self.options = options or RenderOptions()

    @property
    def matrix(self) -> np.ndarray:
        """Boolean module matrix; True indicates a dark module."""
        return self.qr.modules

    @property
    def pixel_shape(self) -> tuple[int, int]:
        side = self.options.canvas_size(self.qr.size)
        return side, side

    def _full_mask(self) -> np.ndarray:
        """
        Construct the full-resolution boolean mask in pixel space.

        Returns
        -------
        numpy.ndarray
            Boolean array of shape (H, W) where True indicates pixels of
            dark modules and False indicates light pixels, including the
            quiet zone.
        """
        scale = self.options.scale

        # Scale module grid with Kronecker product
        scaled = np.kron(self.matrix, np.ones((scale, scale), dtype=bool))
        return np.pad(
            scaled,
            pad_width=self.options.margin * scale,
            mode="constant",
            constant_values=False,
        )

    def render_array(self) -> np.ndarray:
        """
        Render the symbol to an RGB NumPy array.

        Returns
        -------
        numpy.ndarray
            Array of shape (H, W, 3) with dtype uint8.
        """
        h, w = self.pixel_shape
        img = np.full((h, w, 3), self.options.bg, dtype=np.uint8)
        img[self._full_mask()] = self.options.fg
        return img

    def render_pil(self) -> Image.Image:
        """Render the symbol as an RGB PIL image."""
        return Image.fromarray(self.render_array())

    def to_png_bytes(self) -> bytes:
        """Return PNG-encoded bytes of the rendered symbol."""
        buf = BytesIO()
        self.render_pil().save(buf, format="PNG")
        return buf.getvalue()

    def save_png(self, path: Union[str, Path]) -> None:
        """Save the rendered symbol as a PNG file."""
        self.render_pil().save(Path(path), format="PNG")

    # ---------- Validation / decoding (with OpenCV) ----------

    def _decode_with_cv2(
        self,
        image: Optional[np.ndarray] = None,
    ) -> tuple[Optional[str], bool]:
        """
        Decode a QR image using OpenCV's QRCodeDetector.

        Parameters
        ----------
        image : numpy.ndarray, optional
            RGB image of shape (H, W, 3) to decode. If None, this
            object's own rendering is used.

        Returns
        -------
        tuple of (str or None, bool)
            Decoded text (None if nothing was detected) and whether
            OpenCV reported success.

        Raises
        ------
        RuntimeError
            If OpenCV (cv2) is not installed.
        ValueError
            If `image` is provided but does not have shape (H, W, 3).
        """
        try:
            import cv2
        except ImportError as exc:
            raise RuntimeError(
                "_decode_with_cv2 requires OpenCV (cv2) to be installed."
            ) from exc

        if image is None:
            rgb = self.render_array()
        else:
            rgb = np.asarray(image)
            if rgb.ndim != 3 or rgb.shape[2] != 3:
                raise ValueError("image must be (H, W, 3)")

        bgr = cv2.cvtColor(rgb.astype(np.uint8, copy=False), cv2.COLOR_RGB2BGR)
        data, points, _ = cv2.QRCodeDetector().detectAndDecode(bgr)
        if points is None or not data:
            return None, False
        return data, True

    def validate(self, expected: str, image: Optional[np.ndarray] = None) -> bool:
        """
        Check that the rendering decodes to `expected`.

        Only standard-profile symbols carry format information, so
        compat-profile symbols do not decode.

        Returns
        -------
        bool
            True if a QR code was decoded and its text equals `expected`.
        """
        decoded, ok = self._decode_with_cv2(image=image)
        return bool(ok and decoded == expected)


# ---------- Helper for creation and saving ----------

def save_qr_png(
    path: Union[str, Path],
    text: str,
    options: Optional[QROptions] = None,
    render_options: Optional[RenderOptions] = None,
) -> None:
    """Encode `text` and save it as a PNG file at `path`."""
    QRImage(encode(text, options), render_options).save_png(path)
