"""
Unit tests for added-line counting and vendored file exclusion
"""

import pytest

from review_coverage.analyzer.line_counter import LineCounter
from review_coverage.file_filters import FileFilter, is_vendored
from review_coverage.worker_pool import WorkerPool


def files_path(number, repo='serving'):
    return f'/repos/knative/{repo}/pulls/{number}/files'


def changed(filename, additions, deletions=0):
    return {'filename': filename, 'additions': additions, 'deletions': deletions}


class TestVendorExclusion:
    """Test cases for vendored path detection."""

    @pytest.mark.parametrize('filename', [
        'vendor/foo.go',
        'pkg/vendor/bar.go',
        'third_party/x/vendor/github.com/lib/lib.go',
    ])
    def test_vendored(self, filename):
        assert is_vendored(filename) is True

    @pytest.mark.parametrize('filename', [
        'vendored.go',
        'pkg/vendored/x.go',
        'myvendor/x.go',
        'cmd/main.go',
    ])
    def test_not_vendored(self, filename):
        assert is_vendored(filename) is False

    def test_count_additions_skips_vendored(self):
        """Test that vendored files contribute nothing."""
        files = [changed('vendor/foo.go', 500), changed('pkg/vendor/bar.go', 300),
                 changed('vendored.go', 7), changed('cmd/main.go', 20)]
        assert FileFilter().count_additions(files) == 27

    def test_extra_patterns(self):
        """Test that configured patterns are excluded on top of vendored paths."""
        file_filter = FileFilter(['*.pb.go'])
        files = [changed('api/types.pb.go', 900), changed('api/types.go', 40), changed('vendor/x.go', 1)]

        assert file_filter.is_excluded('api/types.pb.go') is True
        assert file_filter.count_additions(files) == 40


class TestLineCounter:
    """Test cases for LineCounter."""

    @pytest.fixture
    def pool(self):
        with WorkerPool(3) as pool:
            yield pool

    @pytest.fixture
    def counter(self, api_client, pool):
        return LineCounter(api_client, pool)

    def test_count_pr_across_pages(self, counter, fake_github, make_pr):
        """Test that additions from every page are summed."""
        fake_github.add(files_path(1),
                        [changed('a.go', 10), changed('vendor/v.go', 1000)],
                        [changed('b.go', 5)])

        assert counter.count_pr(make_pr(1)) == 15

    def test_no_eligible_files(self, counter, fake_github, make_pr):
        """Test that a PR with only vendored files contributes zero."""
        fake_github.add(files_path(1), [changed('vendor/v.go', 1000)])
        assert counter.count_pr(make_pr(1)) == 0

    def test_second_count_is_cache_hit(self, counter, fake_github, make_pr):
        """Test that counting a PR twice fetches its files once."""
        fake_github.add(files_path(1), [changed('a.go', 10)], [changed('b.go', 5)])
        pr = make_pr(1)

        first = counter.count_pr(pr)
        calls_after_first = len(fake_github.calls)
        second = counter.count_pr(pr)

        assert first == second == 15
        assert len(fake_github.calls) == calls_after_first

    def test_count_lines_added_sums_set(self, counter, fake_github, make_pr):
        """Test aggregation over several PRs."""
        for number, additions in [(1, 10), (2, 20), (3, 30)]:
            fake_github.add(files_path(number), [changed('main.go', additions)])

        prs = [make_pr(n) for n in (1, 2, 3)]
        assert counter.count_lines_added(prs) == 60

    def test_count_lines_added_reuses_cache_between_sets(self, counter, fake_github, make_pr):
        """Test that a PR shared by two sets is fetched once."""
        for number in (1, 2, 3):
            fake_github.add(files_path(number), [changed('main.go', number)])
        prs = [make_pr(n) for n in (1, 2, 3)]

        assert counter.count_lines_added(prs) == 6
        assert counter.count_lines_added(prs[1:]) == 5
        for number in (1, 2, 3):
            assert len(fake_github.calls_to(files_path(number))) == 1

    def test_duplicate_prs_in_one_set(self, counter, fake_github, make_pr):
        """Test that a PR listed twice is counted twice but fetched once."""
        fake_github.add(files_path(1), [changed('main.go', 4)])

        assert counter.count_lines_added([make_pr(1), make_pr(1)]) == 8
        assert len(fake_github.calls_to(files_path(1))) == 1

    def test_cache_key_is_url(self, counter, fake_github, make_pr):
        """Test that equal numbers in different repositories are counted separately."""
        fake_github.add(files_path(1, 'serving'), [changed('main.go', 4)])
        fake_github.add(files_path(1, 'eventing'), [changed('main.go', 6)])

        assert counter.count_lines_added([make_pr(1, repo='serving'), make_pr(1, repo='eventing')]) == 10

    def test_empty_set(self, counter):
        assert counter.count_lines_added([]) == 0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
