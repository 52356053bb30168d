"""
End-to-end tests for archive generation.
"""

import io
import zipfile
from concurrent.futures import ThreadPoolExecutor
from xml.etree import ElementTree as ET

import pytest

from aiagen.archive import parse_properties, parse_scm
from aiagen.core import UploadedFile
from aiagen.generator import GenerationError

SCM_PATH = "src/appinventor/ai_dev1/Demo/Screen1.scm"
BKY_PATH = "src/appinventor/ai_dev1/Demo/Screen1.bky"
PROPERTIES_PATH = "youngandroidproject/project.properties"


class BrokenStream(io.BytesIO):
    """Upload whose content can no longer be read."""

    def read(self, *args):
        raise OSError("upload vanished")


def unpack(archive: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(archive))


def local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


@pytest.mark.integration
def test_scenario_archive(generator, demo_request, workspace_dir):
    archive = generator.generate(demo_request)

    with unpack(archive) as zf:
        assert set(zf.namelist()) == {PROPERTIES_PATH, SCM_PATH, BKY_PATH}
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())
        scm = parse_scm(zf.read(SCM_PATH).decode("utf-8"))
        bky = ET.fromstring(zf.read(BKY_PATH))
        props = parse_properties(zf.read(PROPERTIES_PATH).decode("utf-8"))

    names = [c["$Name"] for c in scm["Properties"]["$Components"]]
    assert names[:3] == ["Label1", "Button1", "Button2"]
    assert "SearchButton" not in names

    events = [el for el in bky.iter() if local(el.tag) == "block" and el.get("type") == "component_event"]
    assert len(events) == 2
    instances = {el.get("instance_name") for el in bky.iter() if local(el.tag) == "mutation"}
    assert instances - {None} <= set(names) | {"Screen1"}

    numbers = [el.text for el in bky.iter() if local(el.tag) == "field" and el.get("name") == "NUM"]
    assert numbers == ["255", "0", "0"]

    assert props["main"] == "appinventor.ai_dev1.Demo.Screen1"
    assert props["external_comps"] == ""
    assert list(workspace_dir.iterdir()) == []


@pytest.mark.integration
def test_default_archive(generator, make_request):
    with unpack(generator.generate(make_request())) as zf:
        scm = parse_scm(zf.read(SCM_PATH).decode("utf-8"))
        bky = zf.read(BKY_PATH).decode("utf-8")

    names = [c["$Name"] for c in scm["Properties"]["$Components"]]
    assert {"SearchButton", "ClearButton", "SearchBox", "ResultsLabel"} <= set(names)
    assert "SearchButton" in bky and "ClearButton" in bky


@pytest.mark.integration
def test_uploads_are_packaged_and_closed(generator, make_request, make_upload, png_bytes):
    extension = make_upload("Foo.aix", b"PK\x03\x04")
    image = make_upload("logo.png", png_bytes)
    request = make_request(
        requirements="3 buttons with images",
        extension_files=[extension],
        design_image_files=[image],
    )

    with unpack(generator.generate(request)) as zf:
        assert zf.read("assets/logo.png") == png_bytes
        props = parse_properties(zf.read(PROPERTIES_PATH).decode("utf-8"))
        scm = parse_scm(zf.read(SCM_PATH).decode("utf-8"))

    assert props["external_comps"] == "com.appybuilder.Foo"
    images = [c for c in scm["Properties"]["$Components"] if c["$Type"] == "Image"]
    assert [c["Picture"] for c in images] == ["logo.png"]
    assert extension.stream.closed and image.stream.closed


@pytest.mark.integration
def test_failure_cleans_up(generator, make_request, workspace_dir):
    broken = UploadedFile(filename="logo.png", stream=BrokenStream(b"x"))
    request = make_request(design_image_files=[broken])

    with pytest.raises(GenerationError) as exc_info:
        generator.generate(request)

    assert isinstance(exc_info.value.__cause__, OSError)
    assert list(workspace_dir.iterdir()) == []
    assert broken.stream.closed


@pytest.mark.integration
def test_concurrent_requests_are_isolated(generator, make_request, workspace_dir):
    requests = [make_request(project_name=f"App{i}", requirements=f"{i % 10 + 1} buttons") for i in range(8)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        archives = list(pool.map(generator.generate, requests))

    for i, archive in enumerate(archives):
        with unpack(archive) as zf:
            scm = parse_scm(zf.read(f"src/appinventor/ai_dev1/App{i}/Screen1.scm").decode("utf-8"))
        buttons = [c for c in scm["Properties"]["$Components"] if c["$Type"] == "Button"]
        assert len(buttons) == i % 10 + 1
        assert scm["Properties"]["AppName"] == f"App{i}"
    assert list(workspace_dir.iterdir()) == []


@pytest.mark.unit
def test_plan_matches_generation_input(generator, demo_request):
    plan = generator.plan(demo_request)
    assert plan.button_count == 2
    assert plan.effects_for(1)[0].argument == "red"
