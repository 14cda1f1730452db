import random

import pytest
from character_catalog.utils import build_query_params, clamp_page, normalize_choice, paginate, sort_records, total_pages
from fakes import make_character, make_characters

def test_sort_by_name_is_case_insensitive_and_stable():
    records = [
        make_character(5, name="morty Smith"),
        make_character(1, name="Rick Sanchez"),
        make_character(9, name="Morty Smith"),
        make_character(3, name="rick sanchez"),
        make_character(2, name="Beth Smith"),
    ]
    once = sort_records(records, "name")
    assert [c["id"] for c in once] == [2, 5, 9, 1, 3]
    assert sort_records(once, "name") == once

    desc = sort_records(records, "name", "desc")
    # equal names keep their arrival order in descending sorts as well
    assert [c["id"] for c in desc] == [1, 3, 5, 9, 2]

def test_sort_by_id_desc_is_exact_reverse_of_asc():
    records = make_characters(30)
    random.Random(3).shuffle(records)
    asc = sort_records(records, "id", "asc")
    desc = sort_records(records, "id", "desc")
    assert [c["id"] for c in asc] == list(range(1, 31))
    assert desc == asc[::-1]

def test_no_sort_key_keeps_arrival_order_on_a_copy():
    records = make_characters(5)[::-1]
    out = sort_records(records, None, "desc")
    assert out == records
    assert out is not records

def test_unknown_sort_key():
    with pytest.raises(ValueError):
        sort_records(make_characters(2), "species")

@pytest.mark.parametrize("size", [5, 10, 20, 50, 100, 250])
def test_paginate_slice_lengths(size):
    items = list(range(137))
    pages = total_pages(len(items), size)
    for page in range(1, pages + 1):
        assert len(paginate(items, page, size)) == min(size, len(items) - (page - 1) * size)
    assert sum(len(paginate(items, p, size)) for p in range(1, pages + 1)) == len(items)

def test_total_pages_and_clamp():
    assert total_pages(0, 20) == 1
    assert total_pages(20, 20) == 1
    assert total_pages(21, 20) == 2
    assert clamp_page(0, 3) == 1
    assert clamp_page(7, 3) == 3
    assert clamp_page(2, 3) == 2

def test_paginate_out_of_range_page_is_clamped():
    items = list(range(100))
    assert paginate(items, 6, 20) == list(range(80, 100))
    assert paginate([], 3, 20) == []

def test_build_query_params_omits_unset_filters():
    params = build_query_params(3, {"name": "rick", "status": "", "species": "", "gender": "female"})
    assert params == {"page": 3, "name": "rick", "gender": "female"}
    assert build_query_params(1, {}) == {"page": 1}

def test_normalize_choice():
    allowed = ("Alive", "Dead", "unknown")
    assert normalize_choice("dead", allowed) == "Dead"
    assert normalize_choice("Unknown", allowed) == "unknown"
    assert normalize_choice("zombie", allowed) == "unknown"
    assert normalize_choice(None, allowed) == "unknown"
