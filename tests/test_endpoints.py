from __future__ import annotations

import asyncio

import pytest
from aiohttp import ClientSession, web

from site_harvest.crawler.endpoints import (
    EndpointFetcher,
    decode_json_body,
    discover_endpoints,
    extract_json_text,
)

from conftest import serve_app


def test_discover_endpoints_matches_pattern_table():
    html = """
    <script>
      fetch("/api/courses?page=1");
      load('/Student/GetProfile');
      load("/FetchNews");
      load("/program/detail/42");
      load("/campus/overview_all");
      load('/Course/Catalog');
      load("/api/courses?page=1");
      load("/getprofile");
      load("/static/app.js");
    </script>
    """
    found = discover_endpoints(html, "https://uni.example/index.html")
    assert found == [
        "https://uni.example/api/courses?page=1",
        "https://uni.example/Student/GetProfile",
        "https://uni.example/FetchNews",
        "https://uni.example/program/detail/42",
        "https://uni.example/campus/overview_all",
        "https://uni.example/Course/Catalog",
    ]


def test_discover_endpoints_drops_cross_origin():
    html = '<a href="//cdnhost/GetThing">x</a> "/api/ok"'
    assert discover_endpoints(html, "https://uni.example/") == ["https://uni.example/api/ok"]


def test_extract_json_text_walks_nested_values():
    data = {
        "title": "Bachelor of Computer Science programme",
        "short": "too few words",
        "count": 12,
        "active": True,
        "missing": None,
        "items": [
            {"body": "  Students learn algorithms and data structures  "},
            ["nested list entry with enough words"],
        ],
    }
    texts = extract_json_text(data)
    assert sorted(texts) == sorted(
        [
            "Bachelor of Computer Science programme",
            "Students learn algorithms and data structures",
            "nested list entry with enough words",
        ]
    )


@pytest.mark.parametrize(
    "body,content_type,expected",
    [
        ('{"a": 1}', "application/json; charset=utf-8", {"a": 1}),
        ('[1, 2]', "text/plain", [1, 2]),
        ("<html></html>", "text/html", None),
        ("{broken", "application/json", None),
    ],
)
def test_decode_json_body(body, content_type, expected):
    assert decode_json_body(body, content_type) == expected


@pytest.mark.asyncio()
async def test_fetch_texts_skips_failures(unused_tcp_port: int):
    app = web.Application()

    async def good(_):
        return web.json_response({"text": "Welcome to the faculty of engineering"})

    async def plain_json(_):
        return web.Response(text='["Admissions are open until the end of May"]', content_type="text/plain")

    async def html(_):
        return web.Response(text="<p>Not JSON at all, sorry about that</p>", content_type="text/html")

    async def error(_):
        return web.json_response({"text": "this error body must be ignored"}, status=500)

    async def slow(_):
        await asyncio.sleep(2)
        return web.json_response({"text": "arrives far too late to be used"})

    app.router.add_get("/api/good", good)
    app.router.add_get("/api/plain", plain_json)
    app.router.add_get("/api/html", html)
    app.router.add_get("/api/error", error)
    app.router.add_get("/api/slow", slow)

    async for base in serve_app(app, unused_tcp_port):
        async with ClientSession() as session:
            fetcher = EndpointFetcher(session, timeout=0.5, limit=10, concurrency=2)
            texts = await fetcher.fetch_texts(
                f"{base}{path}"
                for path in ("/api/good", "/api/plain", "/api/html", "/api/error", "/api/slow", "/api/missing")
            )

    assert texts == [
        "Welcome to the faculty of engineering",
        "Admissions are open until the end of May",
    ]


@pytest.mark.asyncio()
async def test_fetch_texts_respects_limit(unused_tcp_port: int):
    app = web.Application()
    calls = {"n": 0}

    async def handler(_):
        calls["n"] += 1
        return web.json_response({"text": "one two three four five"})

    app.router.add_get("/api/{n}", handler)

    async for base in serve_app(app, unused_tcp_port):
        async with ClientSession() as session:
            fetcher = EndpointFetcher(session, limit=3)
            texts = await fetcher.fetch_texts(f"{base}/api/{i}" for i in range(10))

    assert calls["n"] == 3
    assert len(texts) == 3


@pytest.mark.asyncio()
async def test_fetch_text_ignores_non_2xx_json(unused_tcp_port: int):
    app = web.Application()

    async def multiple_choices(_):
        return web.json_response({"text": "three hundred status body is not content"}, status=300)

    app.router.add_get("/api/choices", multiple_choices)

    async for base in serve_app(app, unused_tcp_port):
        async with ClientSession() as session:
            fetcher = EndpointFetcher(session, timeout=2.0)
            texts = await fetcher.fetch_text(f"{base}/api/choices")

    assert texts == []
