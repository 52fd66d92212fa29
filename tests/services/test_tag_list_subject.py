from mediatags.domain.entities.tag import Tag
from mediatags.services.tags.observable import TagListSubject


def _tag(i, name):
    return Tag(id=i, name=name, color="#000000")


def test_new_listener_gets_current_list():
    subject = TagListSubject([_tag(1, "A")])
    got = []
    subject.subscribe(got.append)
    assert [[t.name for t in tags] for tags in got] == [["A"]]

    quiet = []
    subject.subscribe(quiet.append, emit_current=False)
    assert quiet == []


def test_publish_reaches_all_listeners_even_if_one_fails():
    subject = TagListSubject()
    got = []

    def _broken(tags):
        raise RuntimeError("listener bug")

    subject.subscribe(_broken)
    subject.subscribe(got.append)
    subject.publish([_tag(1, "A"), _tag(2, "B")])

    assert [t.id for t in got[-1]] == [1, 2]
    assert [t.id for t in subject.current] == [1, 2]


def test_unsubscribe_and_context_manager():
    subject = TagListSubject()
    got = []
    with subject.subscribe(got.append) as sub:
        assert subject.listener_count == 1
        assert sub.active
    assert not sub.active
    assert subject.listener_count == 0

    sub.unsubscribe()  # second call is a no-op
    subject.publish([_tag(1, "A")])
    assert got == [[]]


def test_listeners_get_their_own_copy():
    subject = TagListSubject()
    got = []
    subject.subscribe(got.append, emit_current=False)
    subject.publish([_tag(1, "A")])
    got[0].clear()
    assert len(subject.current) == 1
