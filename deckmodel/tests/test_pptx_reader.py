"""Tests for reading whole packages."""

import zipfile
from datetime import datetime, timezone
from io import BytesIO

import pytest

from deckmodel.config import MAX_GROUP_DEPTH_LIMIT, Settings
from deckmodel.dsl.schema import ImageBackground, NoBackground, SolidBackground
from deckmodel.parser import PackageError, PPTXReader, sequential_ids
from deckmodel.tests.builders import (
    PNG_1X1,
    REL_IMAGE,
    PackageBuilder,
    corrupt_entry,
    grp,
    paragraph,
    pic,
    replace_entry,
    run,
    slide_xml,
    sp,
    xfrm,
)


class TestPackageErrors:
    """Failures that reject the whole package."""

    def test_not_a_zip(self, reader: PPTXReader) -> None:
        """Arbitrary bytes raise PackageError."""
        with pytest.raises(PackageError):
            reader.read(b"definitely not a zip file")

    def test_missing_presentation_part(self, reader: PPTXReader) -> None:
        """A zip without a presentation part raises PackageError."""
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("word/document.xml", "<document/>")
        with pytest.raises(PackageError):
            reader.read(buffer.getvalue())

    def test_malformed_presentation_part(self, reader: PPTXReader) -> None:
        """Unparsable presentation XML raises PackageError."""
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("ppt/presentation.xml", "<p:presentation")
        with pytest.raises(PackageError):
            reader.read(buffer.getvalue())

    def test_malformed_presentation_relationships(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """Slides cannot be located without the presentation's relationships."""
        builder.add_slide(slide_xml([sp(2, "One", xfrm())]))
        package = replace_entry(builder.build(), "ppt/_rels/presentation.xml.rels", b"<Relationships><oops")
        with pytest.raises(PackageError):
            reader.read(package)

    def test_corrupt_presentation_part(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A presentation part failing its CRC check raises PackageError."""
        builder.add_slide(slide_xml([sp(2, "One", xfrm())]))
        with pytest.raises(PackageError):
            reader.read(corrupt_entry(builder.build(), "ppt/presentation.xml"))


class TestSlides:
    """Tests for slide assembly."""

    def test_single_shape_at_one_inch(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A one-inch square at the origin is 96x96 pixels."""
        builder.add_slide(slide_xml([sp(2, "Box", xfrm(0, 0, 914400, 914400), fill="FF0000")]))
        document = reader.read(builder.build())

        slide = document.slides[0]
        box = slide.objects[0]
        assert (box.geometry.x, box.geometry.y, box.geometry.width, box.geometry.height) == (0, 0, 96, 96)
        assert (box.geometry.emu.cx, box.geometry.emu.cy) == (914400, 914400)
        assert slide.width == 960
        assert slide.height == 720

    def test_group_child_geometry(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A child of a scaled group lands at its absolute position."""
        group = grp(
            10,
            "Group",
            xfrm(952500, 952500, 1905000, 1905000, child=(0, 0, 952500, 952500)),
            [sp(11, "Child", xfrm(0, 0, 952500, 952500))],
        )
        builder.add_slide(slide_xml([group]))
        leaf = reader.read(builder.build()).slides[0].leaves()[0]
        assert (leaf.geometry.x, leaf.geometry.y, leaf.geometry.width, leaf.geometry.height) == (
            100,
            100,
            200,
            200,
        )

    def test_slide_order_numbers_and_names(self, reader: PPTXReader, sample_pptx: bytes) -> None:
        """Slides follow the slide list; unnamed slides get a positional name."""
        document = reader.read(sample_pptx)
        assert [slide.slide_number for slide in document.slides] == [1, 2]
        assert [slide.name for slide in document.slides] == ["Slide 1", "Details"]
        assert document.metadata.slide_count == 2

    def test_missing_slide_part_is_skipped(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A slide whose part is absent is skipped and reported."""
        builder.add_slide(slide_xml([sp(2, "One", xfrm())]))
        builder.add_slide(None)
        builder.add_slide(slide_xml([sp(2, "Three", xfrm())]))
        document = reader.read(builder.build())

        assert [slide.slide_number for slide in document.slides] == [1, 3]
        assert document.report.skipped_slides == [2]
        assert document.metadata.slide_count == 2
        assert not document.report.is_clean

    def test_malformed_slide_is_skipped(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """Unparsable slide XML skips only that slide."""
        builder.add_slide("<p:sld><p:cSld>")
        builder.add_slide(slide_xml([sp(2, "Fine", xfrm())]))
        document = reader.read(builder.build())

        assert [slide.slide_number for slide in document.slides] == [2]
        assert document.report.skipped_slides == [1]

    def test_corrupt_slide_part_is_skipped(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A slide entry that fails to decompress skips only that slide."""
        builder.add_slide(slide_xml([sp(2, "One", xfrm())]))
        builder.add_slide(slide_xml([sp(2, "Two", xfrm())]))
        document = reader.read(corrupt_entry(builder.build(), "ppt/slides/slide1.xml"))

        assert [slide.slide_number for slide in document.slides] == [2]
        assert document.report.skipped_slides == [1]

    def test_corrupt_media_keeps_every_slide(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A media entry that fails to decompress degrades to an image without payload."""
        builder.add_slide(
            slide_xml([pic(2, "Photo", xfrm(0, 0, 95250, 95250)), sp(3, "Caption", xfrm(), fill="112233")]),
            rels=[("rId2", REL_IMAGE, "../media/image1.png")],
        )
        builder.add_slide(slide_xml([sp(2, "Two", xfrm())]))
        builder.add_image()
        document = reader.read(corrupt_entry(builder.build(), "ppt/media/image1.png"))

        assert [slide.slide_number for slide in document.slides] == [1, 2]
        assert document.report.skipped_slides == []
        assert document.report.missing_media == 1
        image, caption = document.slides[0].objects
        assert image.type == "image"
        assert image.target == "ppt/media/image1.png"
        assert image.has_payload is False
        assert caption.fill == "#112233"

    def test_malformed_slide_relationships_skip_slide(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A slide whose .rels file does not parse is skipped, not stripped of its media."""
        builder.add_slide(slide_xml([pic(2, "Photo", xfrm())]))
        builder.add_slide(slide_xml([sp(2, "Two", xfrm())]))
        builder.add_image()
        builder.parts["ppt/slides/_rels/slide1.xml.rels"] = b"<Relationships><oops"
        document = reader.read(builder.build())

        assert [slide.slide_number for slide in document.slides] == [2]
        assert document.report.skipped_slides == [1]

    def test_nesting_deeper_than_limit_skips_slide(self, builder: PackageBuilder) -> None:
        """Groups nested past the depth limit skip the slide."""
        nested = sp(99, "Leaf", xfrm())
        for level in range(3):
            nested = grp(10 + level, f"G{level}", xfrm(), [nested])
        builder.add_slide(slide_xml([nested]))
        builder.add_slide(slide_xml([grp(10, "Shallow", xfrm(), [sp(11, "Leaf", xfrm())])]))

        document = PPTXReader(max_depth=2, id_factory=sequential_ids()).read(builder.build())
        assert [slide.slide_number for slide in document.slides] == [2]
        assert document.report.skipped_slides == [1]

    def test_depth_limit_is_clamped(self, monkeypatch) -> None:
        """Depth caps beyond the safe limit, or below zero, are clamped."""
        assert PPTXReader(max_depth=10_000).max_depth == MAX_GROUP_DEPTH_LIMIT
        assert PPTXReader(max_depth=-3).max_depth == 0

        monkeypatch.setenv("DECKMODEL_MAX_GROUP_DEPTH", "100000")
        assert Settings().max_group_depth == MAX_GROUP_DEPTH_LIMIT

    def test_deep_nesting_with_large_limit_skips_slide(self, builder: PackageBuilder) -> None:
        """Nesting past the clamped limit is reported, never a RecursionError."""
        nested = sp(9999, "Leaf", xfrm())
        for level in range(MAX_GROUP_DEPTH_LIMIT + 5):
            nested = grp(10 + level, f"G{level}", xfrm(), [nested])
        builder.add_slide(slide_xml([nested]))

        document = PPTXReader(max_depth=10_000, id_factory=sequential_ids()).read(builder.build())
        assert document.slides == []
        assert document.report.skipped_slides == [1]

    def test_empty_presentation(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A presentation without slides parses to an empty slide list."""
        document = reader.read(builder.build())
        assert document.slides == []
        assert document.metadata.slide_count == 0

    def test_parse_is_deterministic(self, sample_pptx: bytes) -> None:
        """Two parses with the same id factory produce equal documents."""
        first = PPTXReader(id_factory=sequential_ids()).read(sample_pptx)
        second = PPTXReader(id_factory=sequential_ids()).read(sample_pptx)
        assert first == second

    def test_default_ids_are_unique_across_parses(self, sample_pptx: bytes) -> None:
        """Random IDs differ between documents."""
        first = PPTXReader().read(sample_pptx)
        second = PPTXReader().read(sample_pptx)
        assert first.id != second.id
        assert first.slides[0].id != second.slides[0].id

    def test_reads_from_path(self, reader: PPTXReader, sample_pptx: bytes, tmp_path) -> None:
        """Paths are accepted as well as bytes."""
        path = tmp_path / "deck.pptx"
        path.write_bytes(sample_pptx)
        assert len(reader.read(path).slides) == 2


class TestBackgroundsAndNotes:
    """Tests for slide backgrounds and speaker notes."""

    def test_solid_background(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """An explicit solid fill becomes a solid background."""
        background = '<p:bgPr><a:solidFill><a:srgbClr val="FFF2CC"/></a:solidFill><a:effectLst/></p:bgPr>'
        builder.add_slide(slide_xml([], background=background))
        slide = reader.read(builder.build()).slides[0]
        assert slide.background == SolidBackground(color="#FFF2CC")

    def test_background_reference_resolves_scheme_color(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A background reference uses the theme palette."""
        builder.with_theme()
        builder.add_slide(slide_xml([], background='<p:bgRef idx="1001"><a:schemeClr val="bg1"/></p:bgRef>'))
        slide = reader.read(builder.build()).slides[0]
        assert slide.background == SolidBackground(color="#FFFFFF")

    def test_image_background(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """A picture background carries the image as a data URI."""
        background = '<p:bgPr><a:blipFill><a:blip r:embed="rId2"/><a:stretch/></a:blipFill></p:bgPr>'
        builder.add_slide(
            slide_xml([], background=background),
            rels=[("rId2", REL_IMAGE, "../media/image1.png")],
        )
        builder.add_image()
        slide = reader.read(builder.build()).slides[0]
        assert isinstance(slide.background, ImageBackground)
        assert slide.background.mime_type == "image/png"
        assert slide.background.payload() == PNG_1X1

    def test_no_background(self, reader: PPTXReader, sample_pptx: bytes) -> None:
        """Slides without <p:bg> inherit, reported as no background."""
        assert isinstance(reader.read(sample_pptx).slides[0].background, NoBackground)

    def test_notes(self, reader: PPTXReader, sample_pptx: bytes) -> None:
        """Notes come from the notes slide body placeholder."""
        document = reader.read(sample_pptx)
        assert document.slides[0].notes == "Welcome everyone"
        assert document.slides[1].notes is None


class TestMetadata:
    """Tests for document metadata."""

    def test_core_properties(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """Core properties map onto metadata fields."""
        builder.with_core(
            title="Plan",
            creator="Ada",
            subject="Roadmap",
            keywords="q3, plan",
            lastModifiedBy="Grace",
            revision="7",
            created="2024-01-15T09:30:00Z",
            modified="2024-02-01T17:00:00Z",
        )
        metadata = reader.read(builder.build()).metadata

        assert metadata.title == "Plan"
        assert metadata.author == "Ada"
        assert metadata.subject == "Roadmap"
        assert metadata.keywords == "q3, plan"
        assert metadata.last_modified_by == "Grace"
        assert metadata.revision == 7
        assert metadata.created == datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
        assert metadata.modified == datetime(2024, 2, 1, 17, 0, tzinfo=timezone.utc)

    def test_defaults_without_core_properties(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """Missing properties fall back to the configured defaults."""
        document = reader.read(builder.build())
        assert document.name == "Imported Presentation"
        assert document.metadata.author == "Unknown"
        assert document.metadata.title is None
        assert document.metadata.created is None
        assert document.metadata.theme is None

    def test_malformed_timestamp_is_counted(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """Unparsable timestamps become None and are counted."""
        builder.with_core(created="last tuesday")
        document = reader.read(builder.build())
        assert document.metadata.created is None
        assert document.report.malformed_values == 1

    def test_name_precedence(self, reader: PPTXReader, sample_pptx: bytes) -> None:
        """An explicit name beats the core title."""
        assert reader.read(sample_pptx).name == "Quarterly Review"
        assert reader.read(sample_pptx, name="Board Deck").name == "Board Deck"

    def test_slide_size(self, reader: PPTXReader) -> None:
        """Slide size comes from <p:sldSz> with its preset type."""
        builder = PackageBuilder(slide_size=(12192000, 6858000), size_type=None)
        size = reader.read(builder.build()).metadata.slide_size
        assert (size.width, size.height, size.type) == (1280, 720, None)

    def test_missing_slide_size_defaults_to_four_by_three(self, reader: PPTXReader) -> None:
        """Without <p:sldSz> the size is 10 x 7.5 inches."""
        size = reader.read(PackageBuilder(slide_size=None).build()).metadata.slide_size
        assert (size.width, size.height) == (960, 720)

    def test_theme(self, reader: PPTXReader, sample_pptx: bytes) -> None:
        """Theme name, palette and fonts are read."""
        theme = reader.read(sample_pptx).metadata.theme
        assert theme.name == "Test Theme"
        assert theme.colors.dark1 == "#000000"
        assert theme.colors.light1 == "#FFFFFF"
        assert theme.colors.accent1 == "#4472C4"
        assert theme.colors.followed_hyperlink == "#954F72"
        assert theme.major_font == "Calibri Light"
        assert theme.minor_font == "Calibri"

    def test_malformed_numbers_are_counted(self, reader: PPTXReader, builder: PackageBuilder) -> None:
        """Malformed numeric attributes default to zero and are counted."""
        shape = sp(
            2,
            "Odd",
            '<a:xfrm><a:off x="wide" y="0"/><a:ext cx="914400" cy="914400"/></a:xfrm>',
            paragraphs=[paragraph(run("Text"))],
        )
        builder.add_slide(slide_xml([shape]))
        document = reader.read(builder.build())
        assert document.slides[0].objects[0].geometry.x == 0
        assert document.report.malformed_values == 1
