"""Integration test: the songwriter built from independent behaviors.

Composes SingsSongs and HasAwards with an ``after`` resolution, derives a
child composite that depends on the parent's ``songs``, and drives several
receivers through it end to end.
"""

import pytest

from composable.behavior import resolve
from composable.composition import compose
from composable.core.errors import MissingCapability, UnresolvedDuplicateMethod
from composable.examples.musicians import (
    HasAwards,
    Introduces,
    SingsSongs,
    Songwriter,
)


class TestSongwriterScenario:
    def test_single_initialize_sets_up_both_behaviors(self):
        tracy = Songwriter.create(full_name="Tracy Chapman")
        tracy.initialize().add_song("Fast Car").add_award("Grammy")

        assert tracy.songs() == ["Fast Car"]
        assert tracy.awards() == ["Grammy"]
        assert tracy.full_name == "Tracy Chapman"

    def test_receivers_are_isolated(self):
        tracy = Songwriter.create().initialize()
        joni = Songwriter.create().initialize()
        tracy.add_song("Fast Car")
        joni.add_song("Both Sides Now").add_award("Grammy")

        assert tracy.songs() == ["Fast Car"]
        assert tracy.awards() == []
        assert joni.songs() == ["Both Sides Now"]

    def test_reinitialize_clears_both_lists(self):
        tracy = Songwriter.create().initialize()
        tracy.add_song("Fast Car").add_award("Grammy")
        tracy.initialize()
        assert tracy.songs() == []
        assert tracy.awards() == []

    def test_without_resolution_composition_fails(self):
        with pytest.raises(UnresolvedDuplicateMethod):
            compose(None, SingsSongs, HasAwards)

    def test_child_depends_on_parent_capability(self):
        Performer = compose(Songwriter, Introduces, name="Performer")
        tracy = Performer.create().initialize()
        assert tracy.introduction() == "No songs yet"

        tracy.add_song("Talkin' 'bout a Revolution").add_song("Fast Car")
        assert tracy.introduction() == "Best known for Fast Car"
        assert Performer.origins("initialize") == ("SingsSongs", "HasAwards (after)")

    def test_dependency_on_later_sibling_is_missing(self):
        composite = compose(
            None,
            Introduces,
            SingsSongs,
            resolve(HasAwards, {"initialize": "after"}),
        )
        tracy = composite.create().initialize()
        with pytest.raises(MissingCapability, match="requires 'songs'"):
            tracy.introduction()

    def test_methods_report_their_behavior(self):
        assert Songwriter.lookup("songs").__behavior__ == "SingsSongs"
        assert Songwriter.lookup("awards").__behavior__ == "HasAwards"
        assert Songwriter.lookup("songs").__name__ == "songs"
