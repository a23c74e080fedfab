import pytest

from src.platform.exception.exceptions import DomainError
from src.service.conference.domain.value_object.entity_key import EntityKey


pytestmark = pytest.mark.unit


class TestEntityKey:
    def setup_method(self):
        self.profile_key = EntityKey(kind='Profile', id='alice')
        self.conference_key = self.profile_key.child('Conference', 7)
        self.session_key = self.conference_key.child('Session', 3)

    def test_websafe_round_trip_keeps_the_whole_chain(self):
        restored = EntityKey.from_websafe(self.session_key.to_websafe())

        assert restored == self.session_key
        assert restored.parent == self.conference_key
        assert restored.root == self.profile_key

    def test_websafe_is_url_safe(self):
        websafe = self.session_key.to_websafe()

        assert '=' not in websafe
        assert '+' not in websafe
        assert '/' not in websafe

    def test_int_and_str_ids_are_different_keys(self):
        assert EntityKey(kind='Conference', id=7) != EntityKey(kind='Conference', id='7')

    def test_path_lists_kinds_from_root(self):
        assert self.session_key.path == 'Profile:alice/Conference:7/Session:3'

    def test_path_escapes_separators_in_ids(self):
        key = EntityKey(kind='Profile', id='a/b:c')

        assert key.path == 'Profile:a%2Fb%3Ac'

    def test_is_descendant_of_includes_self_and_ancestors(self):
        assert self.session_key.is_descendant_of(self.session_key)
        assert self.session_key.is_descendant_of(self.conference_key)
        assert self.session_key.is_descendant_of(self.profile_key)
        assert not self.conference_key.is_descendant_of(self.session_key)

    def test_other_users_conference_is_not_a_descendant(self):
        other = EntityKey(kind='Profile', id='bob').child('Conference', 7)

        assert not other.is_descendant_of(self.profile_key)

    @pytest.mark.parametrize('websafe', ['!!!', 'bm90LWpzb24', 'W10', 'WzFd'])
    def test_malformed_websafe_raises_domain_error(self, websafe):
        with pytest.raises(DomainError, match='Malformed key'):
            EntityKey.from_websafe(websafe)

    def test_empty_id_is_rejected(self):
        with pytest.raises(DomainError):
            EntityKey(kind='Profile', id='')

    def test_bool_id_is_rejected(self):
        with pytest.raises(DomainError):
            EntityKey(kind='Conference', id=True)
