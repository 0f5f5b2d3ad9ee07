"""
Property-based tests for frontier admission.

For any sequence of URLs, each distinct URL is admitted exactly once and the
visited set holds exactly the admitted URLs.
"""

import threading

from hypothesis import HealthCheck, given, settings, strategies as st

from sitecrawler.frontier import Frontier


segment_strategy = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz0123456789-_",
    min_size=1,
    max_size=8,
)


@st.composite
def page_url_strategy(draw):
    """Generate a canonical https URL on example.com."""
    segments = draw(st.lists(segment_strategy, max_size=4))
    path = "/" + "/".join(segments)
    return f"https://example.com{path}"


class TestTryAdmitProperties:
    @given(urls=st.lists(page_url_strategy(), max_size=30))
    @settings(max_examples=100, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_each_distinct_url_admitted_exactly_once(self, urls):
        frontier = Frontier()

        admitted = [url for url in urls if frontier.try_admit(url)]

        assert len(admitted) == len(set(urls))
        assert set(admitted) == set(urls)
        assert frontier.visited_urls() == set(urls)
        assert frontier.pending_count() == len(set(urls))

    @given(urls=st.lists(page_url_strategy(), min_size=1, max_size=20), repeats=st.integers(1, 4))
    @settings(
        max_examples=25,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    def test_concurrent_admission_admits_each_url_once(self, urls, repeats):
        frontier = Frontier()
        accepted = []
        accepted_lock = threading.Lock()
        workload = urls * repeats

        def admit_all():
            for url in workload:
                if frontier.try_admit(url):
                    with accepted_lock:
                        accepted.append(url)

        threads = [threading.Thread(target=admit_all) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert sorted(accepted) == sorted(set(urls))
        assert frontier.visited_urls() == set(urls)

    @given(url=page_url_strategy())
    @settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_url_stays_visited_after_processing(self, url):
        frontier = Frontier([url])

        taken = frontier.take_next()
        frontier.task_done()

        assert taken == url
        assert frontier.try_admit(url) is False
        assert frontier.drained()
