import gbc_transform.core_types as core_types
from gbc_transform.utils import colour_usage_report, split_rows_into_parts

from conftest import solid


def test_colour_usage_report_counts_visible_pixels():
    img = solid(3, 2, (255, 0, 0, 255))
    img[0, 0] = (0, 16, 255, 255)
    img[1, 2] = (1, 2, 3, 0)
    assert colour_usage_report(img) == [("#ff0000", 4), ("#0010ff", 1)]
    assert ("#010203", 1) in colour_usage_report(img, include_transparent=True)


def test_colour_usage_report_all_transparent():
    assert colour_usage_report(solid(2, 2, (0, 0, 0, 0))) == []


def test_split_rows_covers_range():
    spans = split_rows_into_parts(10, 3)
    assert spans == [(0, 4), (4, 8), (8, 10)]
    assert split_rows_into_parts(0, 4) == []


def test_no_unused_mask_alias():
    assert not hasattr(core_types, "U8Mask")
    assert "U8Mask" not in core_types.__all__
