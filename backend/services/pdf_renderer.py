import asyncio
import base64
import io
import logging
import fitz  # PyMuPDF
import pdfplumber

logger = logging.getLogger("pdf_renderer")

PDF_MAGIC = b"%PDF-"


class PDFRenderer:
    """Rasterize PDF pages held in memory to JPEG images."""

    def __init__(self, data: bytes, jpeg_quality: int = 80):
        self.data = data
        self.jpeg_quality = jpeg_quality

    async def page_count(self) -> int:
        return await asyncio.to_thread(self._page_count)

    async def render_page(self, page_number: int, scale: float = 2.0) -> bytes:
        """Render a 1-based page number to JPEG bytes at the given scale factor."""
        return await asyncio.to_thread(self._render, page_number, scale)

    async def render_page_base64(self, page_number: int, scale: float = 2.0) -> str:
        image = await self.render_page(page_number, scale)
        return base64.b64encode(image).decode("ascii")

    def _page_count(self) -> int:
        # Try PyMuPDF first
        try:
            with fitz.open(stream=self.data, filetype="pdf") as doc:
                return doc.page_count
        except Exception as e:
            logger.warning(f"PyMuPDF failed, falling back to pdfplumber: {e}")
            with pdfplumber.open(io.BytesIO(self.data)) as pdf:
                return len(pdf.pages)

    def _render(self, page_number: int, scale: float) -> bytes:
        try:
            return self._render_with_pymupdf(page_number, scale)
        except Exception as e:
            logger.warning(f"PyMuPDF render of page {page_number} failed, falling back to pdfplumber: {e}")
            return self._render_with_pdfplumber(page_number, scale)

    def _render_with_pymupdf(self, page_number: int, scale: float) -> bytes:
        with fitz.open(stream=self.data, filetype="pdf") as doc:
            page = doc.load_page(page_number - 1)
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            return pix.tobytes("jpeg", jpg_quality=self.jpeg_quality)

    def _render_with_pdfplumber(self, page_number: int, scale: float) -> bytes:
        with pdfplumber.open(io.BytesIO(self.data)) as pdf:
            page = pdf.pages[page_number - 1]
            image = page.to_image(resolution=int(72 * scale)).original.convert("RGB")
            buf = io.BytesIO()
            image.save(buf, format="JPEG", quality=self.jpeg_quality)
            return buf.getvalue()


def looks_like_pdf(data: bytes) -> bool:
    return data[:1024].lstrip().startswith(PDF_MAGIC)
