import streamlit as st

from core.configs import CALCULATORS
from core.content import (
    get_blog_post,
    get_loan_option,
    load_blog_posts,
    load_loan_options,
    posts_by_category,
    related_calculators,
)


def go_to(page: str, **extra):
    """Button callback switching the sidebar page before the next run."""
    st.session_state["page"] = page
    st.session_state.update(extra)


def render_home():
    st.subheader("Mortgage calculators")
    st.write("Estimate payments, affordability and investment returns before you talk to a loan officer.")
    items = list(CALCULATORS.values())
    for i in range(0, len(items), 2):
        cols = st.columns(2)
        for col, config in zip(cols, items[i : i + 2]):
            with col.container(border=True):
                st.markdown(f"### {config.icon} {config.title}")
                st.caption(config.description)
                st.button(
                    "Open calculator",
                    key=f"home_{config.id}",
                    on_click=go_to,
                    args=("Calculators",),
                    kwargs={"calculator": config.id},
                )


def render_loan_options():
    options = load_loan_options()
    slug = st.session_state.get("loan_option")
    if slug in options:
        render_loan_option(slug)
        return
    st.subheader("Loan Options")
    for option in options.values():
        with st.container(border=True):
            st.markdown(f"### {option.title}")
            st.caption(option.short_description)
            st.button("Learn more", key=f"option_{option.slug}", on_click=go_to, args=("Loan Options",),
                      kwargs={"loan_option": option.slug})


def render_loan_option(slug: str):
    option = get_loan_option(slug)
    st.button("← All loan options", key="option_back", on_click=go_to, args=("Loan Options",),
              kwargs={"loan_option": None})
    st.subheader(option.title)
    st.write(option.full_description)
    benefits, requirements, ideal = st.columns(3)
    with benefits:
        st.markdown("**Benefits**")
        st.markdown("\n".join(f"- {b}" for b in option.benefits))
    with requirements:
        st.markdown("**Requirements**")
        st.markdown("\n".join(f"- {r}" for r in option.requirements))
    with ideal:
        st.markdown("**Ideal for**")
        st.markdown("\n".join(f"- {i}" for i in option.ideal_for))
    calcs = related_calculators(slug)
    if calcs:
        st.markdown("**Related calculators**")
        for config in calcs:
            st.button(f"{config.icon} {config.title}", key=f"related_{slug}_{config.id}", on_click=go_to,
                      args=("Calculators",), kwargs={"calculator": config.id})


def render_blog():
    slug = st.session_state.get("blog_post")
    if slug in load_blog_posts():
        render_blog_post(slug)
        return
    st.subheader("Blog")
    for category, posts in posts_by_category().items():
        st.markdown(f"#### {category}")
        for post in posts:
            with st.container(border=True):
                st.markdown(f"**{post.title}**")
                st.caption(f"{post.author} • {post.publish_date:%B %d, %Y} • {post.read_time} min read")
                st.write(post.excerpt)
                st.button("Read", key=f"post_{post.slug}", on_click=go_to, args=("Blog",),
                          kwargs={"blog_post": post.slug})


def render_blog_post(slug: str):
    post = get_blog_post(slug)
    st.button("← All posts", key="post_back", on_click=go_to, args=("Blog",), kwargs={"blog_post": None})
    st.caption(f"{post.author} • {post.publish_date:%B %d, %Y} • {post.read_time} min read")
    st.markdown(post.content)
    if post.tags:
        st.caption("Tags: " + ", ".join(post.tags))
