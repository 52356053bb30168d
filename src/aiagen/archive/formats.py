"""Project text formats: project.properties, Screen1.scm and archive paths."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any

from ..core.validate import UploadedFile
from ..synth.models import FORM_TYPE, FORM_VERSION, SCREEN_NAME, YA_VERSION, Component

SCM_PREAMBLE = "#|\n$JSON\n"
SCM_POSTAMBLE = "\n|#"

PROPERTIES_TEMPLATE = """#
#{timestamp}
sizing=Responsive
color.primary.dark=&HFF303F9F
color.primary=&HFF3F51B5
color.accent=&HFFFF4081
aname={project_name}
defaultfilescope=App
main=appinventor.ai_{user_id}.{project_name}.Screen1
source=../src
actionbar=True
useslocation=False
assets=../assets
build=../build
name={project_name}
showlistsasjson=True
theme=AppTheme.Light.DarkActionBar
versioncode=1
versionname=1.0
external_comps={external_comps}
"""


class ScmFormatError(ValueError):
    """Screen definition text is not in the expected wrapper."""


@dataclass(frozen=True)
class ProjectPaths:
    """Archive-relative locations of every generated file."""

    properties: PurePosixPath
    scm: PurePosixPath
    bky: PurePosixPath
    assets: PurePosixPath

    def asset(self, filename: str) -> PurePosixPath:
        return self.assets / filename


def project_paths(user_id: str, project_name: str) -> ProjectPaths:
    """Fixed archive layout for one project."""
    screen_dir = PurePosixPath("src", "appinventor", f"ai_{user_id}", project_name)
    return ProjectPaths(
        properties=PurePosixPath("youngandroidproject", "project.properties"),
        scm=screen_dir / f"{SCREEN_NAME}.scm",
        bky=screen_dir / f"{SCREEN_NAME}.bky",
        assets=PurePosixPath("assets"),
    )


def extension_identifiers(extension_files: Sequence[UploadedFile], namespace: str) -> list[str]:
    """Namespaced component identifiers, one per extension file base name."""
    return [f"{namespace}.{upload.stem}" for upload in extension_files]


def format_timestamp(moment: datetime | None = None) -> str:
    """Timestamp line in the style of a Java properties header."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%a %b %d %H:%M:%S UTC %Y")


def render_properties(
    project_name: str,
    user_id: str,
    external_comps: Sequence[str] = (),
    moment: datetime | None = None,
) -> str:
    return PROPERTIES_TEMPLATE.format(
        timestamp=format_timestamp(moment),
        project_name=project_name,
        user_id=user_id,
        external_comps=",".join(external_comps),
    )


def parse_properties(text: str) -> dict[str, str]:
    """Parse key=value lines, skipping comments."""
    result = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        result[key.strip()] = value.strip()
    return result


def screen_document(project_name: str, components: Sequence[Component]) -> dict[str, Any]:
    """JSON document of the screen definition."""
    return {
        "authURL": [],
        "YaVersion": YA_VERSION,
        "Source": "Form",
        "Properties": {
            "$Name": SCREEN_NAME,
            "$Type": FORM_TYPE,
            "$Version": FORM_VERSION,
            "AppName": project_name,
            "Title": project_name,
            "Uuid": "0",
            "$Components": [component.to_scm() for component in components],
        },
    }


def render_scm(project_name: str, components: Sequence[Component]) -> str:
    body = json.dumps(screen_document(project_name, components), indent=2, ensure_ascii=False)
    return f"{SCM_PREAMBLE}{body}{SCM_POSTAMBLE}"


def parse_scm(text: str) -> dict[str, Any]:
    """
    Extract the JSON document from Screen1.scm text.

    Raises:
        ScmFormatError: If the comment wrapper is missing or the JSON is invalid
    """
    if not (text.startswith(SCM_PREAMBLE) and text.endswith(SCM_POSTAMBLE)):
        raise ScmFormatError("Missing #|$JSON ... |# wrapper")
    body = text[len(SCM_PREAMBLE) : -len(SCM_POSTAMBLE)]
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ScmFormatError(f"Invalid screen JSON: {e}") from e
