"""Page geometry handed to the rendering engine."""

from pydantic import BaseModel, ConfigDict


class Margins(BaseModel):
    """Page margins as CSS lengths."""

    model_config = ConfigDict(frozen=True)

    top: str
    right: str
    bottom: str
    left: str


class PageGeometry(BaseModel):
    """Paper size, margins and print options for a render.

    Attributes:
        format: Paper format name understood by Chromium-based engines
        width: Paper width as CSS length
        height: Paper height as CSS length
        margins: Page margins
        print_background: Include background colours and images
        prefer_css_page_size: Let the document's @page rule win over the format
    """

    model_config = ConfigDict(frozen=True)

    format: str
    width: str
    height: str
    margins: Margins
    print_background: bool = True
    prefer_css_page_size: bool = True


A4_PORTRAIT = PageGeometry(
    format="A4",
    width="210mm",
    height="297mm",
    margins=Margins(top="18mm", right="16mm", bottom="20mm", left="16mm"),
)
