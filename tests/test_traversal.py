"""Tests for github_mcp_server.traversal module."""

import pytest

from github_mcp_server.traversal import (
    BINARY_PLACEHOLDER,
    UNREADABLE_PLACEHOLDER,
    ContentWalker,
    get_contents_tree,
    is_likely_text_file,
    looks_like_text,
)


class TestIsLikelyTextFile:
    @pytest.mark.parametrize("name", [
        "main.py", "README.md", "config.YAML", "script.R", ".gitignore",
        "README", "LICENSE", "Makefile", "makefile", "Dockerfile", "README.rst",
    ])
    def test_text(self, name):
        assert is_likely_text_file(name) is True

    @pytest.mark.parametrize("name", ["logo.png", "app.exe", "archive.tar.gz", "data", "notes.docx"])
    def test_not_text(self, name):
        assert is_likely_text_file(name) is False


class TestLooksLikeText:
    def test_empty(self):
        assert looks_like_text("") is True

    def test_plain_text(self):
        assert looks_like_text("hello\r\n\tworld\n") is True

    def test_nul_heavy(self):
        assert looks_like_text("a" * 95 + "\0" * 5) is False

    def test_single_nul_at_one_percent_is_text(self):
        assert looks_like_text("a" * 99 + "\0") is True

    def test_control_heavy(self):
        assert looks_like_text("a" * 90 + "\x01" * 10) is False

    def test_few_controls(self):
        assert looks_like_text("a" * 96 + "\x1b" * 4) is True


class TestContentWalker:
    @pytest.mark.asyncio
    async def test_small_text_and_oversized_file(self, fake_client, make_entry):
        fake_client.directories[""] = [
            make_entry("main.py", size=12),
            make_entry("big.py", size=500),
        ]
        fake_client.files["main.py"] = b"print('hi')\n"

        nodes = await get_contents_tree(fake_client, "octo", "demo", max_file_size=100)

        assert len(nodes) == 2
        assert nodes[0]["content"] == "print('hi')\n"
        assert nodes[1]["content"] == "[File too large (500 bytes) - content not included]"
        assert ("get_raw_content", "big.py") not in fake_client.calls

    @pytest.mark.asyncio
    async def test_node_fields(self, fake_client, make_entry):
        fake_client.directories[""] = [make_entry("src", type="dir", size=0)]

        nodes = await get_contents_tree(fake_client, "octo", "demo")

        assert nodes == [{
            "name": "src",
            "path": "src",
            "type": "dir",
            "size": 0,
            "sha": "sha-src",
            "url": "https://github.com/octo/demo/blob/main/src",
            "downloadUrl": "",
        }]

    @pytest.mark.asyncio
    async def test_dot_means_root(self, fake_client, make_entry):
        fake_client.directories[""] = [make_entry("a.txt")]
        fake_client.files["a.txt"] = b"a"

        nodes = await get_contents_tree(fake_client, "octo", "demo", path=".")

        assert nodes[0]["name"] == "a.txt"
        assert fake_client.calls[0] == ("get_contents", "")

    @pytest.mark.asyncio
    async def test_binary_by_name(self, fake_client, make_entry):
        fake_client.directories[""] = [make_entry("logo.png")]

        nodes = await get_contents_tree(fake_client, "octo", "demo")

        assert nodes[0]["content"] == BINARY_PLACEHOLDER
        assert len(fake_client.calls) == 1

    @pytest.mark.asyncio
    async def test_binary_by_content(self, fake_client, make_entry):
        fake_client.directories[""] = [make_entry("blob.txt")]
        fake_client.files["blob.txt"] = b"\x00\x01\x02\x03binary"

        nodes = await get_contents_tree(fake_client, "octo", "demo")

        assert nodes[0]["content"] == BINARY_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_unreadable_file(self, fake_client, make_entry):
        fake_client.directories[""] = [make_entry("missing.md")]

        nodes = await get_contents_tree(fake_client, "octo", "demo")

        assert nodes[0]["content"] == UNREADABLE_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_without_content(self, fake_client, make_entry):
        fake_client.directories[""] = [make_entry("main.py")]

        nodes = await get_contents_tree(fake_client, "octo", "demo", include_content=False)

        assert "content" not in nodes[0]
        assert fake_client.calls == [("get_contents", "")]

    @pytest.mark.asyncio
    async def test_not_recursive(self, fake_client, make_entry):
        fake_client.directories[""] = [make_entry("src", type="dir")]
        fake_client.directories["src"] = [make_entry("src/a.py")]

        nodes = await get_contents_tree(fake_client, "octo", "demo")

        assert "children" not in nodes[0]

    @pytest.mark.asyncio
    async def test_recursive_depth_first_order(self, fake_client, make_entry):
        fake_client.directories[""] = [
            make_entry("a", type="dir"),
            make_entry("b.txt"),
            make_entry("c", type="dir"),
        ]
        fake_client.directories["a"] = [make_entry("a/inner", type="dir")]
        fake_client.directories["a/inner"] = [make_entry("a/inner/deep.txt")]
        fake_client.directories["c"] = []
        fake_client.files.update({"b.txt": b"b", "a/inner/deep.txt": b"deep"})

        walker = ContentWalker(fake_client, "octo", "demo", recursive=True)
        nodes = await walker.walk()

        assert fake_client.calls == [
            ("get_contents", ""),
            ("get_contents", "a"),
            ("get_contents", "a/inner"),
            ("get_raw_content", "a/inner/deep.txt"),
            ("get_raw_content", "b.txt"),
            ("get_contents", "c"),
        ]
        deep = nodes[0]["children"][0]["children"][0]
        assert deep["content"] == "deep"
        assert nodes[2]["children"] == []

    @pytest.mark.asyncio
    async def test_subtree_failure_is_isolated(self, fake_client, make_entry):
        fake_client.directories[""] = [
            make_entry("locked", type="dir"),
            make_entry("open", type="dir"),
        ]
        fake_client.directories["open"] = [make_entry("open/x.txt")]
        fake_client.files["open/x.txt"] = b"x"

        nodes = await get_contents_tree(fake_client, "octo", "demo", recursive=True)

        assert nodes[0]["children"] == []
        assert nodes[0]["error"].startswith("Could not access directory:")
        assert "Not Found" in nodes[0]["error"]
        assert nodes[1]["children"][0]["content"] == "x"
        assert "error" not in nodes[1]

    @pytest.mark.asyncio
    async def test_top_level_failure(self, fake_client):
        nodes = await get_contents_tree(fake_client, "octo", "demo", path="nowhere")

        assert len(nodes) == 1
        assert nodes[0]["path"] == "nowhere"
        assert nodes[0]["error"].startswith("Could not access path 'nowhere':")
        assert set(nodes[0]) == {"error", "path"}
