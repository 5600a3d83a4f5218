"""Tests for navigation definition loading."""

import json
from pathlib import Path

import pytest
from docnav.core.definition import NavigationDefinitionError, load_navigation, parse_navigation
from docnav.core.navigation import Group, Leaf, Section

SIDEBAR = {
    "sections": [
        {"items": [{"label": "Overview", "path": "/docs/"}]},
        {
            "title": "Guides",
            "items": [
                {"label": "OIDC Authentication", "path": "/docs/guides/oidc-auth"},
                {
                    "title": "Managed Kubernetes",
                    "subItems": [
                        {"label": "Overview", "path": "/docs/guides/managed-kubernetes/overview"},
                        {"label": "EKS", "path": "/docs/guides/managed-kubernetes/aws-eks"},
                    ],
                },
            ],
        },
    ],
}

EXPECTED = [
    Section(items=(Leaf("Overview", "/docs/"),)),
    Section(
        title="Guides",
        items=(
            Leaf("OIDC Authentication", "/docs/guides/oidc-auth"),
            Group(
                "Managed Kubernetes",
                (
                    Leaf("Overview", "/docs/guides/managed-kubernetes/overview"),
                    Leaf("EKS", "/docs/guides/managed-kubernetes/aws-eks"),
                ),
            ),
        ),
    ),
]


class TestParseNavigation:
    """Tests for parse_navigation()."""

    def test__sections_mapping__parses_tree(self) -> None:
        assert parse_navigation(SIDEBAR) == EXPECTED

    def test__bare_list__parses_tree(self) -> None:
        assert parse_navigation(SIDEBAR["sections"]) == EXPECTED

    def test__items_and_sub_items_are_equivalent(self) -> None:
        """Accept items as well as subItems for groups."""
        data = [{"items": [{"title": "G", "items": [{"label": "A", "path": "/a"}]}]}]

        assert parse_navigation(data) == [Section(items=(Group("G", (Leaf("A", "/a"),)),))]

    def test__generate__sets_generate_from(self) -> None:
        data = [{"items": [{"title": "Guides", "generate": "/docs/guides"}]}]

        tree = parse_navigation(data)

        assert tree[0].items == (Group("Guides", (), generate_from="/docs/guides"),)

    def test__deep_nesting(self) -> None:
        """Support groups nested beyond one level."""
        data = [
            {
                "items": [
                    {"title": "L1", "items": [{"title": "L2", "items": [{"title": "L3", "items": [{"label": "Deep", "path": "/deep"}]}]}]},
                ],
            },
        ]

        tree = parse_navigation(data)

        assert tree[0].items == (Group("L1", (Group("L2", (Group("L3", (Leaf("Deep", "/deep"),)),)),)),)

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            ({"pages": []}, "navigation must contain a sections list"),
            ("sidebar", "sections must be a list"),
            ([42], r"sections\[0\] must be a mapping"),
            ([{"title": ""}], r"sections\[0\].title must be a non-empty string"),
            ([{"items": {}}], r"sections\[0\].items must be a list"),
            ([{"items": [{"label": "", "path": "/a"}]}], r"sections\[0\].items\[0\].label must be a non-empty string"),
            ([{"items": [{"label": "A", "path": 3}]}], r"sections\[0\].items\[0\].path must be a non-empty string"),
            ([{"items": [{"label": "A"}]}], r"items\[0\] must have a path, items or generate"),
            ([{"items": [{"items": []}]}], r"items\[0\].title must be a non-empty string"),
            (
                [{"items": [{"label": "A", "path": "/a", "items": []}]}],
                "cannot have both a path and items",
            ),
            (
                [{"items": [{"title": "G", "items": [], "subItems": []}]}],
                "cannot have both items and subItems",
            ),
            (
                [{"items": [{"title": "G", "subItems": [{"title": "H", "items": [{"path": "/x"}]}]}]}],
                r"sections\[0\].items\[0\].subItems\[0\].items\[0\].label must be a non-empty string",
            ),
        ],
    )
    def test__invalid__raises_with_location(self, data: object, message: str) -> None:
        with pytest.raises(NavigationDefinitionError, match=message):
            parse_navigation(data)

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            (
                [{"label": "Overview", "path": "/docs/"}],
                r"sections\[0\] looks like a link; place it inside a section's items",
            ),
            (
                [{"title": "Guides", "item": [{"label": "A", "path": "/a"}]}],
                r"sections\[0\] has unknown key\(s\) item",
            ),
            (
                [{"items": [{"label": "A", "path": "/a", "title": "x", "order": 1}]}],
                r"sections\[0\].items\[0\] has unknown key\(s\) order, title",
            ),
            (
                [{"items": [{"title": "G", "items": [], "label": "G"}]}],
                r"sections\[0\].items\[0\] has unknown key\(s\) label",
            ),
        ],
    )
    def test__unknown_keys__raise_with_location(self, data: object, message: str) -> None:
        """Reject keys that would otherwise be silently dropped."""
        with pytest.raises(NavigationDefinitionError, match=message):
            parse_navigation(data)

    def test__error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_navigation(None)


class TestLoadNavigation:
    """Tests for load_navigation()."""

    def test__yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "navigation.yaml"
        path.write_text(
            """
sections:
  - items:
      - label: Overview
        path: /docs/
  - title: Guides
    items:
      - label: OIDC Authentication
        path: /docs/guides/oidc-auth
      - title: Managed Kubernetes
        subItems:
          - label: Overview
            path: /docs/guides/managed-kubernetes/overview
          - label: EKS
            path: /docs/guides/managed-kubernetes/aws-eks
""",
        )

        assert load_navigation(path) == EXPECTED

    def test__json(self, tmp_path: Path) -> None:
        path = tmp_path / "navigation.json"
        path.write_text(json.dumps(SIDEBAR))

        assert load_navigation(path) == EXPECTED

    def test__toml(self, tmp_path: Path) -> None:
        path = tmp_path / "navigation.toml"
        path.write_text(
            """
[[sections]]
title = "Docs"

[[sections.items]]
label = "A"
path = "/docs/a"
""",
        )

        assert load_navigation(path) == [Section(title="Docs", items=(Leaf("A", "/docs/a"),))]

    def test__missing_file__raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Navigation definition not found"):
            load_navigation(tmp_path / "missing.yaml")

    def test__unsupported_format__raises(self, tmp_path: Path) -> None:
        path = tmp_path / "navigation.txt"
        path.write_text("sections: []")

        with pytest.raises(NavigationDefinitionError, match="unsupported format"):
            load_navigation(path)

    def test__malformed_file__raises(self, tmp_path: Path) -> None:
        path = tmp_path / "navigation.json"
        path.write_text("{not json")

        with pytest.raises(NavigationDefinitionError, match="could not be parsed"):
            load_navigation(path)
