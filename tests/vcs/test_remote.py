import unittest

from gen_changelog.vcs.remote import parse_remote


class TestParseRemote(unittest.TestCase):
    def test_https_remote(self) -> None:
        self.assertEqual(parse_remote("https://github.com/user/repo.git"), ("user", "repo"))

    def test_ssh_remote(self) -> None:
        self.assertEqual(parse_remote("git@github.com:org/my-repo.git"), ("org", "my-repo"))

    def test_repo_with_underscore_and_digits(self) -> None:
        self.assertEqual(parse_remote("https://github.com/jerus-org/gen_changelog2.git"), ("jerus-org", "gen_changelog2"))

    def test_non_matching_remotes(self) -> None:
        for url in [
            "https://gitlab.com/user/repo.git",
            "https://github.com/user/repo",
            "https://github.com/-user/repo.git",
            "https://github.com/user-/repo.git",
            "https://github.com/" + "a" * 40 + "/repo.git",
            "https://github.com/user/re.po.git",
            "",
            None,
        ]:
            with self.subTest(url=url):
                self.assertIsNone(parse_remote(url))

    def test_owner_of_maximum_length(self) -> None:
        owner = "a" * 39
        self.assertEqual(parse_remote(f"https://github.com/{owner}/repo.git"), (owner, "repo"))


if __name__ == "__main__":
    unittest.main()
