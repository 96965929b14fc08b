"""
Tests for Project: current request resolution, lazy default folder,
adding and removing requests.
"""

from uuid import uuid4

from hypothesis import given, strategies as st, settings

from falcon_http.schemas.project import DEFAULT_FOLDER, Project
from falcon_http.schemas.request import HttpMethod, PendingRequest, RequestItem


def make_project(*folders: tuple[str, int]) -> Project:
    """Project with the given (folder, request count) layout and no active request."""
    return Project(
        requests={name: [PendingRequest(name=f"{name}-{i}") for i in range(count)] for name, count in folders}
    )


class TestCurrentRequest:

    def test_default_project_has_root_folder_with_one_request(self):
        project = Project()

        assert list(project.requests) == [DEFAULT_FOLDER]
        assert len(project.requests[DEFAULT_FOLDER]) == 1
        assert project.current_request()[0] == DEFAULT_FOLDER

    def test_active_request_wins_across_folders(self):
        project = make_project(("a", 2), ("b", 2))
        target = project.requests["b"][1]
        project.set_current_request(target.id)

        assert project.current_request() == ("b", target)

    def test_fallback_is_first_request_in_folder_order(self):
        project = make_project(("empty", 0), ("b", 2), ("a", 1))

        assert project.current_request() == ("b", project.requests["b"][0])

    def test_dangling_active_id_falls_back(self):
        project = make_project(("a", 1))
        project.set_current_request(uuid4())

        assert project.current_request_id() == project.requests["a"][0].id

    def test_no_requests_resolves_to_none(self):
        project = Project(requests={})

        assert project.current_request() is None
        assert project.current_request_id() is None

    def test_mutable_access_creates_root_folder(self):
        project = Project(requests={})

        request = project.current_request_mut()

        assert project.requests == {DEFAULT_FOLDER: [request]}
        assert project.active_request_id == request.id

    def test_mutable_access_on_empty_folders_is_none(self):
        project = make_project(("a", 0))

        assert project.current_request_mut() is None
        assert list(project.requests) == ["a"]


class TestEditing:

    def test_edits_reach_current_request(self):
        project = make_project(("root", 2))
        second = project.requests["root"][1]
        project.set_current_request(second.id)

        project.update_request_url("https://api.test")
        project.update_request_method(HttpMethod.PUT)
        project.update_request_item(RequestItem.HEADER, 0, "Accept", is_key=True)
        project.update_request_item(RequestItem.HEADER, 0, "text/plain", is_key=False)

        assert second.url == "https://api.test"
        assert second.method is HttpMethod.PUT
        assert second.headers == [("Accept", "text/plain"), ("", "")]
        assert project.requests["root"][0].url == "https://"

    def test_add_request_creates_folder_and_selects(self):
        project = Project()
        request = PendingRequest(name="new")

        project.add_request("users", request)

        assert project.requests["users"] == [request]
        assert project.current_request() == ("users", request)


class TestRemoveRequest:

    @given(count=st.integers(min_value=2, max_value=6), data=st.data())
    @settings(max_examples=50)
    def test_removing_current_resolves_to_remaining_request(self, count, data):
        project = make_project(("root", count))
        victim = project.requests["root"][data.draw(st.integers(0, count - 1))]
        project.set_current_request(victim.id)

        project.remove_request("root", victim.id)

        current = project.current_request()
        assert current is not None
        assert current[1].id != victim.id
        assert project.active_request_id == current[1].id

    def test_removing_last_request_clears_active_id(self):
        project = make_project(("root", 1))
        only = project.requests["root"][0]
        project.set_current_request(only.id)

        project.remove_request("root", only.id)

        assert project.current_request() is None
        assert project.active_request_id is None

    def test_removing_from_other_folder_keeps_current(self):
        project = make_project(("a", 1), ("b", 2))
        keep = project.requests["a"][0]
        project.set_current_request(keep.id)

        project.remove_request("b", project.requests["b"][0].id)

        assert project.current_request_id() == keep.id
        assert len(project.requests["b"]) == 1


class TestDefaultEnvAndDuplicate:

    def test_default_env_pointer(self):
        project = Project()
        env_id = uuid4()

        project.set_default_env(env_id)
        assert project.default_env == env_id

        project.remove_default_env()
        assert project.default_env is None

    def test_duplicate_is_independent(self):
        project = make_project(("root", 1))
        project.is_active = True
        copy = project.duplicate()

        copy.requests["root"][0].set_url("https://changed")
        copy.name = "copy"

        assert copy.id != project.id
        assert copy.is_active is False
        assert project.requests["root"][0].url == "https://"
        assert project.name == "Unknown project"

    def test_request_options(self):
        project = make_project(("a", 1), ("b", 1))

        labels = [option.label for option in project.request_options()]

        assert labels == ["a-0", "b-0"]
