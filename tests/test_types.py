import dataclasses

import pytest

from rpcgate.types import (
    PAGE_NUM_DEFAULT,
    PAGE_SIZE_DEFAULT,
    PAGE_SIZE_MAX,
    SEO,
    Link,
    ModuleConfig,
    Page,
    PageSort,
)


def test_page_defaults():
    page = Page.from_dict({})
    assert page.size == 20
    assert page.num == 1
    assert page.sorts == []


def test_page_matches_constructor_defaults():
    assert Page.from_dict({}) == Page()
    assert Page().size == PAGE_SIZE_DEFAULT
    assert Page().num == PAGE_NUM_DEFAULT


def test_page_with_sorts():
    page = Page.from_dict(
        {"size": 5, "num": 3, "sorts": [{"condition": "name", "order": "asc"}]}
    )
    assert page.size == 5
    assert page.num == 3
    assert page.sorts == [PageSort(condition="name", order="asc")]


@pytest.mark.parametrize("size", [0, PAGE_SIZE_MAX])
def test_page_size_bounds_inclusive(size):
    assert Page.from_dict({"size": size}).size == size


@pytest.mark.parametrize("size", [-1, PAGE_SIZE_MAX + 1, "10"])
def test_page_size_out_of_range(size):
    with pytest.raises(ValueError):
        Page.from_dict({"size": size})


def test_page_sort_requires_fields():
    with pytest.raises(ValueError):
        Page.from_dict({"sorts": [{"condition": "name"}]})


def test_seo_defaults_status():
    seo = SEO.from_dict({"title": "Home"})
    assert seo.title == "Home"
    assert seo.status == 1
    assert seo.path == ""


def test_seo_rejects_bad_status():
    with pytest.raises(ValueError):
        SEO.from_dict({"status": "on"})


def test_module_config_round_trip():
    data = {
        "name": "banner",
        "show_status": 1,
        "show_list": ["a", "b"],
        "link": {"href": "/home", "name": "Home"},
        "status": 2,
        "data_config": {"limit": 4},
    }
    cfg = ModuleConfig.from_dict(data)
    assert cfg.link == Link(href="/home", name="Home")
    assert dataclasses.asdict(cfg) == data


def test_module_config_requires_data_config():
    with pytest.raises(ValueError):
        ModuleConfig.from_dict({"name": "banner"})


def test_module_config_rejects_non_string_show_list():
    with pytest.raises(ValueError):
        ModuleConfig.from_dict({"data_config": {}, "show_list": [1]})