"""Build small PPTX packages in memory from literal OOXML.

Only the parts the reader looks at are written: package relationships,
the presentation part and its relationships, slides, media, notes, theme
and core properties.
"""

import base64
import struct
import zipfile
from io import BytesIO
from typing import Optional

NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"
NS_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
NS_R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_PKG_RELS = "http://schemas.openxmlformats.org/package/2006/relationships"

REL_BASE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
REL_OFFICE_DOCUMENT = f"{REL_BASE}/officeDocument"
REL_SLIDE = f"{REL_BASE}/slide"
REL_THEME = f"{REL_BASE}/theme"
REL_IMAGE = f"{REL_BASE}/image"
REL_NOTES_SLIDE = f"{REL_BASE}/notesSlide"
REL_CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"

NS_DECL = f'xmlns:a="{NS_A}" xmlns:p="{NS_P}" xmlns:r="{NS_R}"'

# A valid 1x1 PNG
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def xfrm(
    x: int = 0,
    y: int = 0,
    cx: int = 0,
    cy: int = 0,
    rot: Optional[int] = None,
    flip_h: bool = False,
    flip_v: bool = False,
    child: Optional[tuple[int, int, int, int]] = None,
) -> str:
    """An <a:xfrm>; ``child`` is (chOff x, chOff y, chExt cx, chExt cy)."""
    attrs = ""
    if rot is not None:
        attrs += f' rot="{rot}"'
    if flip_h:
        attrs += ' flipH="1"'
    if flip_v:
        attrs += ' flipV="1"'
    inner = f'<a:off x="{x}" y="{y}"/><a:ext cx="{cx}" cy="{cy}"/>'
    if child is not None:
        ch_x, ch_y, ch_cx, ch_cy = child
        inner += f'<a:chOff x="{ch_x}" y="{ch_y}"/><a:chExt cx="{ch_cx}" cy="{ch_cy}"/>'
    return f"<a:xfrm{attrs}>{inner}</a:xfrm>"


def run(
    text: str,
    bold: bool = False,
    italic: bool = False,
    underline: Optional[str] = None,
    size: Optional[int] = None,
    color: Optional[str] = None,
    font: Optional[str] = None,
) -> str:
    """An <a:r>; ``size`` is in hundredths of a point."""
    attrs = ""
    if bold:
        attrs += ' b="1"'
    if italic:
        attrs += ' i="true"'
    if underline is not None:
        attrs += f' u="{underline}"'
    if size is not None:
        attrs += f' sz="{size}"'
    inner = ""
    if color is not None:
        inner += f'<a:solidFill><a:srgbClr val="{color}"/></a:solidFill>'
    if font is not None:
        inner += f'<a:latin typeface="{font}"/>'
    return f"<a:r><a:rPr{attrs}>{inner}</a:rPr><a:t>{text}</a:t></a:r>"


def paragraph(*runs: str, algn: Optional[str] = None, lvl: Optional[int] = None, bullet: str = "") -> str:
    """An <a:p>; ``bullet`` is raw <a:buChar>/<a:buAutoNum> markup."""
    attrs = ""
    if algn is not None:
        attrs += f' algn="{algn}"'
    if lvl is not None:
        attrs += f' lvl="{lvl}"'
    p_pr = f"<a:pPr{attrs}>{bullet}</a:pPr>" if attrs or bullet else ""
    return f"<a:p>{p_pr}{''.join(runs)}</a:p>"


def sp(
    shape_id: int,
    name: str,
    transform: str,
    *,
    paragraphs: Optional[list[str]] = None,
    fill: Optional[str] = None,
    line: str = "",
    preset: Optional[str] = "rect",
    placeholder: Optional[str] = None,
) -> str:
    """A <p:sp>; passing ``paragraphs`` adds a text body."""
    nv_pr = f"<p:nvPr>{placeholder}</p:nvPr>" if placeholder else "<p:nvPr/>"
    geometry = f'<a:prstGeom prst="{preset}"><a:avLst/></a:prstGeom>' if preset else ""
    solid = f'<a:solidFill><a:srgbClr val="{fill}"/></a:solidFill>' if fill else ""
    body = ""
    if paragraphs is not None:
        body = f"<p:txBody><a:bodyPr/><a:lstStyle/>{''.join(paragraphs)}</p:txBody>"
    return (
        f'<p:sp><p:nvSpPr><p:cNvPr id="{shape_id}" name="{name}"/><p:cNvSpPr/>{nv_pr}</p:nvSpPr>'
        f"<p:spPr>{transform}{geometry}{solid}{line}</p:spPr>{body}</p:sp>"
    )


def pic(shape_id: int, name: str, transform: str, embed: str = "rId2", src_rect: str = "") -> str:
    """A <p:pic> referencing an embedded image."""
    return (
        f'<p:pic><p:nvPicPr><p:cNvPr id="{shape_id}" name="{name}"/><p:cNvPicPr/><p:nvPr/></p:nvPicPr>'
        f'<p:blipFill><a:blip r:embed="{embed}"/>{src_rect}<a:stretch><a:fillRect/></a:stretch></p:blipFill>'
        f'<p:spPr>{transform}<a:prstGeom prst="rect"><a:avLst/></a:prstGeom></p:spPr></p:pic>'
    )


def grp(shape_id: int, name: str, transform: str, children: list[str]) -> str:
    """A <p:grpSp> around already-built children."""
    return (
        f'<p:grpSp><p:nvGrpSpPr><p:cNvPr id="{shape_id}" name="{name}"/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
        f"<p:grpSpPr>{transform}</p:grpSpPr>{''.join(children)}</p:grpSp>"
    )


def slide_xml(shapes: list[str], name: Optional[str] = None, background: str = "") -> str:
    """A slide part holding the given shape-tree members."""
    name_attr = f' name="{name}"' if name else ""
    bg = f"<p:bg>{background}</p:bg>" if background else ""
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f"<p:sld {NS_DECL}><p:cSld{name_attr}>{bg}<p:spTree>"
        f'<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
        f"<p:grpSpPr>{xfrm(child=(0, 0, 0, 0))}</p:grpSpPr>"
        f"{''.join(shapes)}</p:spTree></p:cSld></p:sld>"
    )


def notes_xml(text: str) -> str:
    """A notes slide with a slide image placeholder and a body placeholder."""
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f"<p:notes {NS_DECL}><p:cSld><p:spTree>"
        f'<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr><p:grpSpPr/>'
        f'<p:sp><p:nvSpPr><p:cNvPr id="2" name="Slide Image"/><p:cNvSpPr/>'
        f'<p:nvPr><p:ph type="sldImg"/></p:nvPr></p:nvSpPr><p:spPr/></p:sp>'
        f'<p:sp><p:nvSpPr><p:cNvPr id="3" name="Notes"/><p:cNvSpPr/>'
        f'<p:nvPr><p:ph type="body" idx="1"/></p:nvPr></p:nvSpPr><p:spPr/>'
        f"<p:txBody><a:bodyPr/>{paragraph(run(text))}</p:txBody></p:sp>"
        f"</p:spTree></p:cSld></p:notes>"
    )


def theme_xml(name: str = "Test Theme", accent1: str = "4472C4") -> str:
    """A theme part with a full color scheme and a font scheme."""
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<a:theme xmlns:a="{NS_A}" name="{name}"><a:themeElements>'
        f'<a:clrScheme name="Office">'
        f'<a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>'
        f'<a:lt1><a:sysClr val="window" lastClr="FFFFFF"/></a:lt1>'
        f'<a:dk2><a:srgbClr val="44546A"/></a:dk2>'
        f'<a:lt2><a:srgbClr val="E7E6E6"/></a:lt2>'
        f'<a:accent1><a:srgbClr val="{accent1}"/></a:accent1>'
        f'<a:accent2><a:srgbClr val="ED7D31"/></a:accent2>'
        f'<a:accent3><a:srgbClr val="A5A5A5"/></a:accent3>'
        f'<a:accent4><a:srgbClr val="FFC000"/></a:accent4>'
        f'<a:accent5><a:srgbClr val="5B9BD5"/></a:accent5>'
        f'<a:accent6><a:srgbClr val="70AD47"/></a:accent6>'
        f'<a:hlink><a:srgbClr val="0563C1"/></a:hlink>'
        f'<a:folHlink><a:srgbClr val="954F72"/></a:folHlink>'
        f"</a:clrScheme>"
        f'<a:fontScheme name="Office">'
        f'<a:majorFont><a:latin typeface="Calibri Light"/></a:majorFont>'
        f'<a:minorFont><a:latin typeface="Calibri"/></a:minorFont>'
        f"</a:fontScheme>"
        f"</a:themeElements></a:theme>"
    )


def core_xml(**fields: str) -> str:
    """docProps/core.xml; keys are element names such as ``title`` or ``creator``."""
    prefixes = {
        "title": "dc",
        "creator": "dc",
        "subject": "dc",
        "description": "dc",
        "keywords": "cp",
        "category": "cp",
        "lastModifiedBy": "cp",
        "revision": "cp",
        "created": "dcterms",
        "modified": "dcterms",
    }
    body = "".join(
        f"<{prefixes[key]}:{key}>{value}</{prefixes[key]}:{key}>" for key, value in fields.items()
    )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" '
        'xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:dcterms="http://purl.org/dc/terms/">'
        f"{body}</cp:coreProperties>"
    )


def rels_xml(relationships: list[tuple[str, str, str]]) -> str:
    """A relationships part from (id, type, target) triples."""
    entries = "".join(
        f'<Relationship Id="{rel_id}" Type="{rel_type}" Target="{target}"/>'
        for rel_id, rel_type, target in relationships
    )
    return f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?><Relationships xmlns="{NS_PKG_RELS}">{entries}</Relationships>'


class PackageBuilder:
    """Collects slides and parts, then zips them into package bytes."""

    def __init__(
        self,
        slide_size: Optional[tuple[int, int]] = (9144000, 6858000),
        size_type: Optional[str] = "screen4x3",
    ) -> None:
        self.slide_size = slide_size
        self.size_type = size_type
        self.slides: list[dict] = []
        self.parts: dict[str, bytes] = {}
        self.theme: Optional[str] = None
        self.core: Optional[str] = None

    def add_slide(
        self,
        xml: Optional[str],
        rels: Optional[list[tuple[str, str, str]]] = None,
        notes: Optional[str] = None,
    ) -> "PackageBuilder":
        """Add a slide; ``xml=None`` references a slide part that is never written."""
        self.slides.append({"xml": xml, "rels": list(rels or []), "notes": notes})
        return self

    def add_image(self, rel_target: str = "../media/image1.png", data: bytes = PNG_1X1) -> "PackageBuilder":
        """Write a media part addressed relative to the slides folder."""
        path = "ppt/" + rel_target.replace("../", "")
        self.parts[path] = data
        return self

    def with_theme(self, xml: Optional[str] = None) -> "PackageBuilder":
        self.theme = xml or theme_xml()
        return self

    def with_core(self, **fields: str) -> "PackageBuilder":
        self.core = core_xml(**fields)
        return self

    def build(self) -> bytes:
        """Zip everything into package bytes."""
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            package_rels = [("rId1", REL_OFFICE_DOCUMENT, "ppt/presentation.xml")]
            if self.core is not None:
                package_rels.append(("rId2", REL_CORE_PROPERTIES, "docProps/core.xml"))
                archive.writestr("docProps/core.xml", self.core)
            archive.writestr("[Content_Types].xml", '<?xml version="1.0"?><Types/>')
            archive.writestr("_rels/.rels", rels_xml(package_rels))

            presentation_rels = []
            slide_ids = []
            for index, slide in enumerate(self.slides, start=1):
                rel_id = f"rId{index + 10}"
                slide_path = f"slides/slide{index}.xml"
                presentation_rels.append((rel_id, REL_SLIDE, slide_path))
                slide_ids.append(f'<p:sldId id="{255 + index}" r:id="{rel_id}"/>')

                if slide["xml"] is None:
                    continue
                archive.writestr(f"ppt/{slide_path}", slide["xml"])

                slide_rels = list(slide["rels"])
                if slide["notes"] is not None:
                    notes_path = f"ppt/notesSlides/notesSlide{index}.xml"
                    archive.writestr(notes_path, notes_xml(slide["notes"]))
                    slide_rels.append(("rIdNotes", REL_NOTES_SLIDE, f"../notesSlides/notesSlide{index}.xml"))
                if slide_rels:
                    archive.writestr(f"ppt/slides/_rels/slide{index}.xml.rels", rels_xml(slide_rels))

            if self.theme is not None:
                presentation_rels.append(("rId1", REL_THEME, "theme/theme1.xml"))
                archive.writestr("ppt/theme/theme1.xml", self.theme)
            archive.writestr("ppt/_rels/presentation.xml.rels", rels_xml(presentation_rels))

            size = ""
            if self.slide_size is not None:
                type_attr = f' type="{self.size_type}"' if self.size_type else ""
                size = f'<p:sldSz cx="{self.slide_size[0]}" cy="{self.slide_size[1]}"{type_attr}/>'
            archive.writestr(
                "ppt/presentation.xml",
                f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
                f"<p:presentation {NS_DECL}><p:sldIdLst>{''.join(slide_ids)}</p:sldIdLst>{size}</p:presentation>",
            )

            for path, data in self.parts.items():
                archive.writestr(path, data)

        return buffer.getvalue()


def corrupt_entry(package: bytes, name: str) -> bytes:
    """Repack a package uncompressed and flip one data byte of an entry.

    The central directory stays valid, so the zip opens; reading the entry
    fails its CRC check.
    """
    buffer = BytesIO()
    with zipfile.ZipFile(BytesIO(package)) as source, zipfile.ZipFile(buffer, "w", zipfile.ZIP_STORED) as target:
        for info in source.infolist():
            target.writestr(info.filename, source.read(info.filename))

    data = bytearray(buffer.getvalue())
    with zipfile.ZipFile(BytesIO(bytes(data))) as repacked:
        offset = repacked.getinfo(name).header_offset
    name_length, extra_length = struct.unpack("<HH", data[offset + 26 : offset + 30])
    data[offset + 30 + name_length + extra_length] ^= 0xFF
    return bytes(data)


def replace_entry(package: bytes, name: str, data: bytes) -> bytes:
    """Repack a package with one entry's contents replaced."""
    buffer = BytesIO()
    with zipfile.ZipFile(BytesIO(package)) as source, zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            target.writestr(info.filename, data if info.filename == name else source.read(info.filename))
    return buffer.getvalue()
