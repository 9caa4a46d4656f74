import pytest

from papersift.services.pager import ResultPager, page, page_window, total_pages


RESULTS = list(range(23))


def test_last_partial_page() -> None:
    assert page(RESULTS, 10, 3) == [20, 21, 22]


def test_out_of_range_page_clamps_to_last() -> None:
    assert page(RESULTS, 10, 99) == [20, 21, 22]


@pytest.mark.parametrize("number", [0, -5])
def test_low_page_clamps_to_first(number) -> None:
    assert page(RESULTS, 10, number) == list(range(10))


def test_empty_results_give_empty_page() -> None:
    assert page([], 10, 1) == []
    assert page([], 10, 7) == []


def test_total_pages() -> None:
    assert total_pages(23, 10) == 3
    assert total_pages(20, 10) == 2
    assert total_pages(0, 10) == 0


def test_page_size_is_configurable() -> None:
    pager = ResultPager(page_size=5)
    assert pager.page(RESULTS, 2) == [5, 6, 7, 8, 9]
    assert pager.total_pages(len(RESULTS)) == 5


def test_invalid_page_size_rejected() -> None:
    with pytest.raises(ValueError):
        ResultPager(page_size=0)


def test_page_info_reports_clamped_number() -> None:
    info = ResultPager().page_info(RESULTS, 99)
    assert info.number == 3
    assert info.total_pages == 3
    assert info.total_items == 23
    assert len(info.items) == 3


@pytest.mark.parametrize("current, total, expected", [
    (5, 10, [1, None, 3, 4, 5, 6, 7, None, 10]),
    (1, 10, [1, 2, 3, None, 10]),
    (10, 10, [1, None, 8, 9, 10]),
    (2, 3, [1, 2, 3]),
    (4, 6, [1, 2, 3, 4, 5, 6]),
    (1, 1, []),
    (1, 0, []),
])
def test_page_window(current, total, expected) -> None:
    assert page_window(current, total) == expected
