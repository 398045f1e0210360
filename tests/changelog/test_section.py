import unittest
from datetime import date

import semver

from gen_changelog.changelog.section import Section
from gen_changelog.changelog.tag import Tag
from gen_changelog.changelog.window import FROM_RELEASE_TO_RELEASE, Window
from gen_changelog.config.model import ChangeLogConfig
from gen_changelog.vcs.git_client import CommitInfo


class RecordingClient:
    def __init__(self, commits):
        self.commits = commits
        self.calls = []

    def walk(self, start, hide=None):
        self.calls.append((start, hide))
        return self.commits


def make_section(**kwargs) -> Section:
    config = ChangeLogConfig.default()
    return Section(
        headings=config.ordered_headings(),
        groups_mapping=config.groups_mapping(),
        **kwargs,
    )


class TestSection(unittest.TestCase):
    def test_add_commit_files_commit_under_group(self) -> None:
        section = make_section()
        self.assertEqual(section.add_commit("feat: a"), "Added")
        self.assertEqual(section.add_commit("feat: b"), "Added")
        self.assertEqual(section.add_commit("chore(deps): bump"), "Security")
        self.assertEqual(section.add_commit("whatever"), "Unknown")
        self.assertEqual([c.title for c in section.commits["Added"]], ["a", "b"])
        self.assertEqual(section.commit_count(), 4)

    def test_walk_repository_uses_window_and_skips_missing_summaries(self) -> None:
        client = RecordingClient([
            CommitInfo("c3", "fix: three", None),
            CommitInfo("c2", None, "body only"),
            CommitInfo("c1", "feat: one", "details"),
        ])
        older = Tag(id="a", name="v1.0.0", version=semver.Version.parse("1.0.0"))
        newer = Tag(id="b", name="v1.1.0", version=semver.Version.parse("1.1.0"))
        section = make_section(tag=newer)
        section.walk_repository(Window(FROM_RELEASE_TO_RELEASE, newer, older), client)

        self.assertEqual(client.calls, [("refs/tags/v1.1.0", "refs/tags/v1.0.0")])
        self.assertEqual(section.commit_count(), 2)
        self.assertEqual(section.commits["Added"][0].body, "details")

    def test_markdown_lists_configured_headings_in_order(self) -> None:
        section = make_section()
        for summary in ["fix: b", "feat: a", "chore: c", "refactor(core)!: d", "random"]:
            section.add_commit(summary)
        self.assertEqual(
            section.markdown(),
            "## [Unreleased]\n\n"
            "### Added\n\n- feat: a\n\n"
            "### Fixed\n\n- fix: b\n\n"
            "### Changed\n\n- refactor(core)!: d\n\n",
        )

    def test_release_header_with_and_without_date(self) -> None:
        tag = Tag(id="a", name="v1.0.0", version=semver.Version.parse("1.0.0"), date=date(2024, 1, 15))
        self.assertEqual(make_section(tag=tag).section_header(), "## [1.0.0] - 2024-01-15")
        undated = Tag(id="a", name="v1.0.0", version=semver.Version.parse("1.0.0"))
        self.assertEqual(make_section(tag=undated).section_header(), "## [1.0.0] - ")

    def test_summary_line(self) -> None:
        section = make_section(summary_flag=True)
        for summary in ["fix: b", "feat: a", "feat: a2", "chore: c", "random"]:
            section.add_commit(summary)
        self.assertEqual(
            section.markdown(),
            "## [Unreleased]\n\n"
            "Summary: Added[2], Chore[1], Fixed[1]\n\n"
            "### Added\n\n- feat: a\n- feat: a2\n\n"
            "### Fixed\n\n- fix: b\n\n",
        )

    def test_summary_flag_renders_empty_section_header(self) -> None:
        section = make_section(summary_flag=True)
        self.assertEqual(section.markdown(), "## [Unreleased]\n\nSummary: \n\n")

    def test_section_without_visible_groups_is_empty(self) -> None:
        section = make_section()
        section.add_commit("chore: c")
        section.add_commit("random text")
        with self.assertLogs("gen_changelog.changelog.section", level="WARNING"):
            self.assertEqual(section.markdown(), "")

    def test_unconventional_commit_is_rendered_verbatim_when_published(self) -> None:
        section = Section(headings=["Unknown"], groups_mapping={})
        section.add_commit("Merge branch 'main'")
        self.assertIn("- Merge branch 'main'\n", section.markdown())

    def test_report_status(self) -> None:
        section = make_section()
        section.add_commit("feat: a")
        report = section.report_status(summary=False)
        self.assertIn("Section: Unreleased contains:", report)
        self.assertIn("1 commits under Added heading", report)


if __name__ == "__main__":
    unittest.main()
