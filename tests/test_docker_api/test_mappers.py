"""Тесты проекций сырых записей демона."""

from __future__ import annotations

import pytest

from dockdash.docker_api import containers, images, networks, volumes
from dockdash.docker_api.models import ProgressDetail, ProgressEvent
from dockdash.docker_api.progress import to_progress_event


class TestContainers:
    """Проекция контейнеров и разбор публикации порта."""

    def test_strips_single_leading_slash(self) -> None:
        record = {"Names": ["/app1", "/alias"], "Status": "Up 3 minutes", "State": "running"}
        summary = containers.to_container_summary(record)
        assert summary.name == "app1"
        assert summary.status == "Up 3 minutes"
        assert summary.state == "running"

    def test_only_one_slash_is_removed(self) -> None:
        assert containers.strip_name_prefix("//odd") == "/odd"
        assert containers.strip_name_prefix("plain") == "plain"

    def test_missing_names_give_none(self) -> None:
        summary = containers.to_container_summary({"State": "exited"})
        assert summary.name is None
        assert summary.ports == ()

    def test_ports_keep_only_bound_ips(self) -> None:
        record = {
            "Names": ["/web"],
            "Ports": [
                {"IP": "0.0.0.0", "PrivatePort": 80, "PublicPort": 8080, "Type": "tcp"},
                {"PrivatePort": 443, "Type": "tcp"},
            ],
        }
        assert containers.to_container_summary(record).ports == ("0.0.0.0",)

    def test_to_dict(self) -> None:
        summary = containers.to_container_summary({"Names": ["/db"], "State": "paused"})
        assert summary.to_dict() == {"name": "db", "status": None, "state": "paused", "ports": []}

    def test_parse_port_mapping(self) -> None:
        mapping = containers.parse_port_mapping("8080:80")
        assert mapping.exposed_ports == {"80/tcp": {}}
        assert mapping.port_bindings == {"80/tcp": [{"HostIp": "0.0.0.0", "HostPort": "8080"}]}
        assert not mapping.is_empty

    @pytest.mark.parametrize("raw", [None, "bad", "1:2:3", "8080"])
    def test_malformed_mapping_is_empty(self, raw) -> None:
        assert containers.parse_port_mapping(raw).is_empty

    def test_container_config(self) -> None:
        config = containers.container_config("nginx", containers.parse_port_mapping("8080:80"))
        assert config["image"] == "nginx"
        assert config["ports"] == ["80"]
        assert config["port_bindings"] == {
            "80/tcp": [{"HostIp": "0.0.0.0", "HostPort": "8080"}]
        }


class TestImagesAndVolumes:
    def test_image_uses_first_repo_tag(self) -> None:
        summary = images.to_image_summary({"RepoTags": ["nginx:latest", "nginx:1"], "Size": 42})
        assert summary.repo_tag == "nginx:latest"
        assert summary.size == 42

    def test_untagged_image(self) -> None:
        summary = images.to_image_summary({"RepoTags": None})
        assert summary.repo_tag == ""
        assert summary.size == 0

    def test_volumes(self) -> None:
        response = {
            "Volumes": [
                {
                    "Name": "data",
                    "Driver": "local",
                    "Mountpoint": "/var/lib/docker/volumes/data/_data",
                    "Labels": None,
                    "Scope": "local",
                }
            ]
        }
        [volume] = volumes.list_volumes(response)
        assert volume.name == "data"
        assert volume.driver == "local"
        assert volume.labels is None
        assert volume.to_dict()["scope"] == "local"

    def test_null_volume_list(self) -> None:
        assert volumes.list_volumes({"Volumes": None}) == []
        assert volumes.list_volumes(None) == []


class TestNetworks:
    """Неполные записи сетей отбрасываются, участники получают имя по умолчанию."""

    def test_incomplete_records_are_dropped(self) -> None:
        records = [
            {"Id": "n1", "Name": "bridge", "Driver": "bridge", "Scope": "local"},
            {"Id": "n2", "Name": "broken", "Driver": "bridge"},
            {"Id": "n3", "Name": "host", "Driver": "host", "Scope": "local", "Internal": False},
        ]
        result = networks.list_networks(records)
        assert [network.name for network in result] == ["bridge", "host"]
        assert result[1].internal is False

    def test_members(self) -> None:
        network = {
            "Id": "n1",
            "Containers": {"abc": {"Name": "web"}, "def": {}},
        }
        members = networks.list_members(network)
        assert [(m.id, m.name, m.network_id) for m in members] == [
            ("abc", "web", "n1"),
            ("def", networks.UNNAMED_MEMBER, "n1"),
        ]

    def test_network_without_members(self) -> None:
        assert networks.list_members({"Id": "n1", "Containers": None}) == []


class TestProgress:
    """Записи прогресса загрузки."""

    def test_full_record(self) -> None:
        raw = {
            "status": "Downloading",
            "progressDetail": {"current": 10, "total": 100},
            "progress": "[=>   ]",
            "id": "a1b2",
        }
        assert to_progress_event(raw) == ProgressEvent(
            status="Downloading", progress_detail=ProgressDetail(10, 100), id="a1b2"
        )

    def test_status_only(self) -> None:
        event = to_progress_event({"status": "Pulling from library/nginx"})
        assert event == ProgressEvent(status="Pulling from library/nginx")

    def test_empty_detail(self) -> None:
        event = to_progress_event({"status": "Waiting", "progressDetail": {}, "id": "x"})
        assert event.progress_detail == ProgressDetail()

    @pytest.mark.parametrize(
        "raw",
        [
            "not a dict",
            {},
            {"status": 5},
            {"status": "ok", "id": 7},
            {"status": "ok", "progressDetail": "half"},
            {"status": "ok", "progressDetail": {"current": "10"}},
            {"status": "ok", "progressDetail": {"total": True}},
        ],
    )
    def test_malformed_records(self, raw) -> None:
        assert to_progress_event(raw) is None
