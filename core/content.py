"""Loan-option pages and blog posts loaded from the bundled JSON files."""
from __future__ import annotations

import json
from collections import OrderedDict
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field

from core.configs import CALCULATORS, CalculatorConfig

DATA_DIR = Path(__file__).resolve().parent / "data"


class LoanOption(BaseModel):
    slug: str
    title: str
    short_description: str
    full_description: str
    benefits: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    ideal_for: List[str] = Field(default_factory=list)
    related_calculators: List[str] = Field(default_factory=list)


class BlogPost(BaseModel):
    slug: str
    title: str
    excerpt: str
    content: str
    author: str
    publish_date: date
    category: str
    tags: List[str] = Field(default_factory=list)
    read_time: int


def _read(name: str) -> list:
    with (DATA_DIR / name).open("r", encoding="utf-8") as f:
        return json.load(f)


@lru_cache()
def load_loan_options() -> Dict[str, LoanOption]:
    return {o.slug: o for o in (LoanOption.model_validate(raw) for raw in _read("loan_options.json"))}


@lru_cache()
def load_blog_posts() -> Dict[str, BlogPost]:
    """Posts keyed by slug, newest first."""
    posts = [BlogPost.model_validate(raw) for raw in _read("blog_posts.json")]
    posts.sort(key=lambda p: p.publish_date, reverse=True)
    return {p.slug: p for p in posts}


def get_loan_option(slug: str) -> LoanOption:
    try:
        return load_loan_options()[slug]
    except KeyError:
        raise KeyError(f"Unknown loan option: {slug}") from None


def get_blog_post(slug: str) -> BlogPost:
    try:
        return load_blog_posts()[slug]
    except KeyError:
        raise KeyError(f"Unknown blog post: {slug}") from None


def related_calculators(slug: str) -> List[CalculatorConfig]:
    """Registered calculators linked from a loan option, skipping unknown ids."""
    option = get_loan_option(slug)
    return [CALCULATORS[c] for c in option.related_calculators if c in CALCULATORS]


def posts_by_category() -> Dict[str, List[BlogPost]]:
    grouped: Dict[str, List[BlogPost]] = OrderedDict()
    for post in load_blog_posts().values():
        grouped.setdefault(post.category, []).append(post)
    return grouped
