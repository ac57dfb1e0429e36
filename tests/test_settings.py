import pytest

from lefthook.settings import LogSettings

ALL = {
    "meta": True,
    "summary": True,
    "success": True,
    "failure": True,
    "skips": True,
    "execution": True,
    "execution_out": True,
    "execution_info": True,
    "empty_summary": True,
}

CASES = [
    ("", "", [], None, ALL),
    ("", "", False, None, {"failure": True}),
    ("", "", ["success"], None, {"success": True}),
    ("", "", ["summary"], None, {"summary": True, "success": True, "failure": True}),
    (
        "",
        "",
        ["failure", "execution"],
        None,
        {"failure": True, "execution": True, "execution_info": True, "execution_out": True},
    ),
    (
        "",
        "",
        ["failure", "execution_out"],
        None,
        {"failure": True, "execution": True, "execution_out": True},
    ),
    (
        "",
        "",
        ["failure", "execution_info"],
        None,
        {"failure": True, "execution": True, "execution_info": True},
    ),
    (
        "",
        "",
        [
            "meta",
            "summary",
            "success",
            "failure",
            "skips",
            "execution",
            "execution_out",
            "execution_info",
            "empty_summary",
        ],
        None,
        ALL,
    ),
    ("", "", True, None, ALL),
    (
        "meta,summary,skips,empty_summary",
        "",
        None,
        None,
        {
            "meta": True,
            "summary": True,
            "success": True,
            "failure": True,
            "skips": True,
            "empty_summary": True,
        },
    ),
    ("", "", None, [], ALL),
    ("", "", None, False, ALL),
    (
        "",
        "",
        None,
        ["failure", "execution"],
        {
            "meta": True,
            "summary": True,
            "success": True,
            "failure": False,
            "skips": True,
            "execution": False,
            "execution_out": False,
            "execution_info": False,
            "empty_summary": True,
        },
    ),
    (
        "",
        "",
        None,
        [
            "meta",
            "summary",
            "skips",
            "execution",
            "execution_out",
            "execution_info",
            "empty_summary",
        ],
        {},
    ),
    ("", "", None, True, {"failure": True}),
    (
        "",
        "meta,summary,success,skips,empty_summary",
        None,
        None,
        {"execution": True, "execution_out": True, "execution_info": True},
    ),
    (
        "",
        "meta,success,skips,empty_summary",
        None,
        None,
        {
            "summary": True,
            "failure": True,
            "execution": True,
            "execution_out": True,
            "execution_info": True,
        },
    ),
    ("", "", True, True, ALL),
    ("", "", ["meta"], True, {"failure": True}),
    ("", "", True, ["meta"], ALL),
    (
        "",
        "",
        ["summary", "execution"],
        ["failure", "execution_out"],
        {"summary": True, "success": True, "execution": True, "execution_info": True},
    ),
    (
        "summary,execution",
        "",
        None,
        ["failure", "execution_out"],
        {
            "summary": True,
            "success": True,
            "failure": True,
            "execution": True,
            "execution_info": True,
            "execution_out": True,
        },
    ),
    ("", "summary,execution", ["meta", "summary", "execution_info"], None, {"meta": True}),
]


def _observed(settings):
    return {
        "meta": settings.log_meta(),
        "success": settings.log_success(),
        "failure": settings.log_failure(),
        "summary": settings.log_summary(),
        "execution": settings.log_execution(),
        "execution_out": settings.log_execution_output(),
        "execution_info": settings.log_execution_info(),
        "empty_summary": settings.log_empty_summary(),
        "skips": settings.log_skips(),
    }


@pytest.mark.parametrize(
    "enable_tags,disable_tags,enable,disable,results",
    CASES,
    ids=[str(i) for i in range(len(CASES))],
)
def test_apply(enable_tags, disable_tags, enable, disable, results):
    settings = LogSettings()
    settings.apply(enable_tags, disable_tags, enable, disable)
    expected = {key: results.get(key, False) for key in ALL}
    assert _observed(settings) == expected


def test_defaults_enable_everything():
    assert _observed(LogSettings()) == ALL


def test_unknown_tags_are_ignored():
    settings = LogSettings()
    settings.apply("nonsense", "", None, None)
    assert _observed(settings) == {key: False for key in ALL}


def test_apply_resets_to_all_without_options():
    settings = LogSettings()
    settings.apply("", "", False, None)
    settings.apply("", "", None, None)
    assert _observed(settings) == ALL