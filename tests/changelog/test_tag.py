import unittest
from datetime import date, datetime, timezone

import semver

from gen_changelog.changelog.tag import Tag, match_release, resolve_tags
from gen_changelog.config.model import ReleasePattern
from gen_changelog.vcs.git_client import GitError, TagRef


class DummyTagClient:
    def __init__(self, names, dates=None, broken=()):
        self.names = names
        self.dates = dates or {}
        self.broken = set(broken)
        self.timestamp_calls = []

    def list_tags(self):
        return [TagRef(id=f"id-{name}", name=name) for name in self.names]

    def commit_timestamp(self, rev):
        self.timestamp_calls.append(rev)
        name = rev[len("refs/tags/"):]
        if name in self.broken:
            raise GitError(f"cannot peel {rev}")
        return self.dates.get(name, datetime(2024, 1, 1, tzinfo=timezone.utc))


class TestMatchRelease(unittest.TestCase):
    def test_prefix_pattern(self) -> None:
        pattern = ReleasePattern.with_prefix("v")
        cases = [
            ("v1.0.0", "1.0.0"),
            ("v10.20.30", "10.20.30"),
            ("v1.5.0-alpha", "1.5.0-alpha"),
            ("v0.1.19-alpha.3+build2937", "0.1.19-alpha.3+build2937"),
            ("v1.0.0+build.5", "1.0.0+build.5"),
        ]
        for name, expected in cases:
            with self.subTest(name=name):
                self.assertEqual(match_release(name, pattern), semver.Version.parse(expected))

    def test_prefix_pattern_rejections(self) -> None:
        pattern = ReleasePattern.with_prefix("v")
        for name in ["1.0.0", "release-1.0.0", "v1.0", "just my tag", "v1.0.0.0", "pkg-v1.0.0"]:
            with self.subTest(name=name):
                self.assertIsNone(match_release(name, pattern))

    def test_invalid_semver_is_discarded_with_warning(self) -> None:
        pattern = ReleasePattern.with_prefix("v")
        with self.assertLogs("gen_changelog.changelog.tag", level="WARNING"):
            self.assertIsNone(match_release("v01.0.0", pattern))

    def test_package_prefix_pattern(self) -> None:
        pattern = ReleasePattern.with_package_prefix("v")
        self.assertEqual(
            match_release("gen-changelog-v0.1.9", pattern, "gen-changelog"),
            semver.Version.parse("0.1.9"),
        )
        self.assertEqual(
            match_release("my_pkg-v2.0.0-rc.1", pattern, "my_pkg"),
            semver.Version.parse("2.0.0-rc.1"),
        )
        self.assertIsNone(match_release("other-v0.1.9", pattern, "gen-changelog"))
        self.assertIsNone(match_release("gen-changelog-0.1.9", pattern, "gen-changelog"))
        self.assertIsNone(match_release("v0.1.9", pattern, "gen-changelog"))

    def test_package_prefix_requires_package(self) -> None:
        pattern = ReleasePattern.with_package_prefix("v")
        self.assertIsNone(match_release("gen-changelog-v0.1.9", pattern))


class TestResolveTags(unittest.TestCase):
    def test_release_tags_sorted_newest_first(self) -> None:
        client = DummyTagClient(["v1.0.0", "v2.0.0", "v1.5.0-alpha"])
        all_tags, release_tags = resolve_tags(client, ReleasePattern.with_prefix("v"))
        self.assertEqual([t.name for t in all_tags], ["v1.0.0", "v2.0.0", "v1.5.0-alpha"])
        self.assertEqual([str(t.version) for t in release_tags], ["2.0.0", "1.5.0-alpha", "1.0.0"])

    def test_prerelease_sorts_before_release(self) -> None:
        client = DummyTagClient(["v1.0.0-rc.1", "v1.0.0", "v1.0.0-alpha", "v0.9.9"])
        _, release_tags = resolve_tags(client, ReleasePattern.with_prefix("v"))
        self.assertEqual(
            [t.name for t in release_tags],
            ["v1.0.0", "v1.0.0-rc.1", "v1.0.0-alpha", "v0.9.9"],
        )

    def test_non_release_tags_are_kept_but_not_released(self) -> None:
        client = DummyTagClient(["v1.0.0", "nightly", "v1.0"])
        all_tags, release_tags = resolve_tags(client, ReleasePattern.with_prefix("v"))
        self.assertEqual(len(all_tags), 3)
        self.assertEqual([t.name for t in release_tags], ["v1.0.0"])
        nightly = all_tags[1]
        self.assertFalse(nightly.is_release)
        self.assertIsNone(nightly.date)
        # Only release tags have their date resolved
        self.assertEqual(client.timestamp_calls, ["refs/tags/v1.0.0"])

    def test_dates_are_attached(self) -> None:
        client = DummyTagClient(
            ["v1.0.0"], dates={"v1.0.0": datetime(2024, 3, 9, 23, 59, tzinfo=timezone.utc)}
        )
        _, release_tags = resolve_tags(client, ReleasePattern.with_prefix("v"))
        self.assertEqual(release_tags[0].date, date(2024, 3, 9))
        self.assertEqual(release_tags[0].id, "id-v1.0.0")

    def test_date_failure_is_tolerated(self) -> None:
        client = DummyTagClient(["v1.0.0", "v1.1.0"], broken=["v1.1.0"])
        with self.assertLogs("gen_changelog.changelog.tag", level="WARNING"):
            _, release_tags = resolve_tags(client, ReleasePattern.with_prefix("v"))
        self.assertEqual([t.name for t in release_tags], ["v1.1.0", "v1.0.0"])
        self.assertIsNone(release_tags[0].date)
        self.assertIsNotNone(release_tags[1].date)

    def test_package_scope(self) -> None:
        client = DummyTagClient(["alpha-v1.0.0", "beta-v2.0.0", "alpha-v1.1.0"])
        _, release_tags = resolve_tags(client, ReleasePattern.with_package_prefix("v"), "alpha")
        self.assertEqual([t.name for t in release_tags], ["alpha-v1.1.0", "alpha-v1.0.0"])
        self.assertEqual(release_tags[0].package, "alpha")

    def test_enumeration_failure_is_fatal(self) -> None:
        class BrokenClient(DummyTagClient):
            def list_tags(self):
                raise GitError("not a repository")

        with self.assertRaises(GitError):
            resolve_tags(BrokenClient([]), ReleasePattern.with_prefix("v"))


class TestTag(unittest.TestCase):
    def test_ref_and_str(self) -> None:
        tag = Tag(id="abc", name="v1.0.0")
        self.assertEqual(tag.ref, "refs/tags/v1.0.0")
        self.assertEqual(str(tag), "v1.0.0")
        self.assertFalse(tag.is_release)


if __name__ == "__main__":
    unittest.main()
