"""Tests for the selection <-> route synchronization protocol."""

from hashnotes.core.route_sync import RouteSync, Synced, Uninitialized


def test_scenario_a_startup_selects_existing_route(make_store, router_factory):
    """Deep link to an existing note selects it and normalizes with replace."""
    store = make_store(("n1", "Hi", "", 100))
    router = router_factory("#/note/n1")

    sync = RouteSync(store, router)
    state = sync.startup()

    assert state == Synced("n1")
    assert store.selected_id == "n1"
    assert router.writes == [("replace", "#/note/n1")]
    assert router.entries == ["#/note/n1"]


def test_scenario_b_unknown_route_falls_back_to_selection(make_store, router_factory):
    store = make_store(("n1", "Hi", "", 100), selected="n1")
    router = router_factory("#/note/ghost")

    state = RouteSync(store, router).startup()

    assert state == Synced("n1")
    assert store.selected_id == "n1"
    assert router.writes == [("replace", "#/note/n1")]


def test_scenario_b_unknown_route_without_selection_clears(make_store, router_factory):
    store = make_store(("n1", "Hi", "", 100))
    router = router_factory("#/note/ghost")

    state = RouteSync(store, router).startup()

    assert state == Synced(None)
    assert store.selected_id is None
    assert router.writes == [("replace", "#")]


def test_startup_without_route_writes_existing_selection(make_store, router_factory):
    store = make_store(("n1", "Hi", "", 100), ("n2", "", "", 90), selected="n2")
    router = router_factory("")

    assert RouteSync(store, router).startup() == Synced("n2")
    assert router.read() == "#/note/n2"
    assert router.pushes() == []


def test_startup_normalizes_encoding(make_store, router_factory):
    store = make_store(("a b", "", "", 1))
    router = router_factory("/note/a%20b")

    RouteSync(store, router).startup()
    assert router.read() == "#/note/a%20b"
    assert len(router.entries) == 1


def test_startup_runs_once(make_store, router_factory):
    store = make_store(("n1", "", "", 1))
    router = router_factory("#/note/n1")
    sync = RouteSync(store, router)
    sync.startup()
    router.write_replace("#")
    assert sync.startup() == Synced("n1")
    assert router.read() == "#"


def test_no_push_before_startup(make_store, router_factory):
    """An uninitialized sync must not clobber the route it has not read yet."""
    store = make_store(("n1", "", "", 1), ("n2", "", "", 1))
    router = router_factory("#/note/n1")
    sync = RouteSync(store, router)
    store.subscribe(lambda change: sync.push() if change.selection else None)

    store.select("n2")
    assert sync.state == Uninitialized()
    assert router.writes == []

    assert sync.startup() == Synced("n1")
    assert store.selected_id == "n1"


def test_open_ignores_selection_changes_made_during_startup(make_store, router_factory):
    store = make_store(("n1", "", "", 1), ("n2", "", "", 1), selected="n2")
    router = router_factory("#/note/n1")

    with RouteSync(store, router) as sync:
        assert sync.state == Synced("n1")
    assert router.writes == [("replace", "#/note/n1")]


def test_scenario_c_delete_selected_reconciles_with_replace(make_store, router_factory):
    store = make_store(("n1", "Hi", "", 100), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router) as sync:
        router.writes.clear()
        store.delete("n1")

        assert router.read() == "#"
        assert router.writes == [("replace", "#")]
        assert sync.state == Synced(None)
    assert len(router.entries) == 1


def test_delete_unselected_routed_note_reconciles_to_selection(make_store, router_factory):
    """Deleting the note the route names rewrites the route to the selection."""
    store = make_store(("n1", "", "", 1), ("n2", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router) as sync:
        router.write_replace("#/note/n2")
        router.writes.clear()
        store.delete("n2")

        assert router.writes == [("replace", "#/note/n1")]
        assert sync.state == Synced("n1")


def test_reconcile_leaves_valid_route_alone(make_store, router_factory):
    store = make_store(("n1", "", "", 1), ("n2", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router):
        router.writes.clear()
        store.update("n1", title="x")
        store.delete("n2")
        assert router.writes == []


def test_scenario_d_user_selection_pushes(make_store, router_factory):
    store = make_store(("n1", "", "", 1), ("n2", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router) as sync:
        router.writes.clear()
        store.select("n2")

        assert router.writes == [("push", "#/note/n2")]
        assert router.entries == ["#/note/n1", "#/note/n2"]
        assert sync.state == Synced("n2")


def test_deselect_pushes_empty_route(make_store, router_factory):
    store = make_store(("n1", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router):
        router.writes.clear()
        store.select(None)
        assert router.writes == [("push", "#")]


def test_deselect_clears_non_canonical_empty_route(make_store, router_factory):
    """A fragment that names no note still gets cleared to the canonical '#'."""
    store = make_store(("n1", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router) as sync:
        router.navigate("#/garbage")
        router.writes.clear()
        store.select(None)

        assert router.read() == "#"
        assert router.writes == [("push", "#")]
        assert sync.state == Synced(None)


def test_add_pushes_new_note(store, router_factory):
    router = router_factory("#")
    with RouteSync(store, router):
        router.writes.clear()
        nid = store.add()
        assert router.writes == [("push", f"#/note/{nid}")]


def test_scenario_e_back_selects_existing(make_store, router_factory):
    store = make_store(("n1", "", "", 1), ("n2", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router) as sync:
        store.select("n2")
        router.writes.clear()

        assert router.back()
        assert store.selected_id == "n1"
        assert sync.state == Synced("n1")
        # pulling must not create a history entry of its own
        assert router.writes == []
        assert router.can_go_forward

        assert router.forward()
        assert store.selected_id == "n2"
        assert router.writes == []


def test_scenario_e_cleared_route_keeps_selection(make_store, router_factory):
    store = make_store(("n1", "", "", 1), selected="n1")
    router = router_factory("#")

    with RouteSync(store, router) as sync:
        assert sync.state == Synced("n1")
        router.writes.clear()
        router.navigate("#")
        assert store.selected_id == "n1"
        assert sync.state == Synced("n1")
        assert router.writes == [("push", "#")]


def test_pull_unknown_id_does_nothing(make_store, router_factory):
    store = make_store(("n1", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router) as sync:
        router.writes.clear()
        router.navigate("#/note/ghost")
        assert store.selected_id == "n1"
        assert sync.state == Synced("n1")
        assert router.writes == [("push", "#/note/ghost")]


def test_manual_navigation_selects_note(make_store, router_factory):
    store = make_store(("n1", "", "", 1), ("n 2", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router):
        router.navigate("#/note/n%202")
        assert store.selected_id == "n 2"
        assert router.entries == ["#/note/n1", "#/note/n%202"]


def test_pull_before_startup_is_ignored(make_store, router_factory):
    store = make_store(("n1", "", "", 1))
    sync = RouteSync(store, router_factory("#"))
    assert sync.pull("#/note/n1") == Uninitialized()
    assert store.selected_id is None


def test_reconcile_before_startup_is_ignored(make_store, router_factory):
    store = make_store(("n1", "", "", 1))
    router = router_factory("#/note/ghost")
    sync = RouteSync(store, router)
    assert sync.reconcile() == Uninitialized()
    assert router.writes == []


def test_close_unsubscribes(make_store, router_factory):
    store = make_store(("n1", "", "", 1), ("n2", "", "", 1), selected="n1")
    router = router_factory("#/note/n1")

    with RouteSync(store, router):
        pass
    router.writes.clear()

    router.navigate("#/note/n2")
    assert store.selected_id == "n1"
    store.select(None)
    assert router.writes == [("push", "#/note/n2")]
