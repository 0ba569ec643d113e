"""Two independently written behaviors that both need ``initialize``.

``SingsSongs`` and ``HasAwards`` each keep a private list. Composed together,
``HasAwards.initialize`` is resolved ``after`` the one from ``SingsSongs`` so
a single ``initialize()`` call sets up both lists.
"""

from composable.behavior import behavior, private, requires, resolve
from composable.composition import compose


@behavior
class SingsSongs:
    _songs = private

    def initialize(self):
        self._songs = []
        return self

    def add_song(self, name):
        self._songs.append(name)
        return self

    def songs(self):
        return self._songs


@behavior
class HasAwards:
    _awards = private

    def initialize(self):
        self._awards = []
        return self

    def add_award(self, name):
        self._awards.append(name)
        return self

    def awards(self):
        return self._awards


@behavior
class Introduces:
    """Needs ``songs`` from whatever it is composed after."""

    songs = requires

    def introduction(self):
        titles = self.songs()
        if not titles:
            return "No songs yet"
        return f"Best known for {titles[-1]}"


Songwriter = compose(
    None,
    SingsSongs,
    resolve(HasAwards, {"initialize": "after"}),
    name="Songwriter",
)
