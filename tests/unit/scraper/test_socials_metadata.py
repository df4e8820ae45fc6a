from __future__ import annotations

from leadradar.scraper.metadata import ProjectSocials, extract_project_socials


def test_first_link_per_network_is_kept():
    html = """
    <footer>
      <a href="https://x.com/alpha">X</a>
      <a href="https://twitter.com/alpha_old">Old</a>
      <a href="https://t.me/alpha">TG</a>
      <a href="https://discord.gg/alpha">Discord</a>
      <a href="https://github.com/alpha-labs">Code</a>
      <a href="https://medium.com/@alpha">Blog</a>
    </footer>
    """
    socials = extract_project_socials(html)
    assert socials == ProjectSocials(
        twitter="https://x.com/alpha",
        telegram="https://t.me/alpha",
        discord="https://discord.gg/alpha",
        github="https://github.com/alpha-labs",
        medium="https://medium.com/@alpha",
    )


def test_missing_html_gives_empty_socials():
    assert extract_project_socials(None).as_dict() == {}
    assert extract_project_socials("<p>no links</p>").as_dict() == {}
