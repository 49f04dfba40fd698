import copy
import json

import pytest

from planview.app.core.metadata import Metadata

ARCH_REF = "101-arch.png"

PAYLOAD = {
    "project": {"name": "테스트 현장", "unit": "px"},
    "disciplines": [{"name": "건축"}, {"name": "구조"}, {"name": "설비"}],
    "drawings": {
        "00": {
            "id": "00",
            "name": "전체 배치도",
            "image": "site plan.png",
            "parent": None,
            "position": None,
        },
        "01": {
            "id": "01",
            "name": "101동",
            "image": "101.png",
            "parent": "00",
            "position": {"vertices": [[0, 0], [100, 0], [100, 100], [0, 100]]},
            "disciplines": {
                "건축": {
                    "image": "101-arch.png",
                    "imageTransform": {
                        "relativeTo": ARCH_REF,
                        "x": 0,
                        "y": 0,
                        "scale": 1,
                        "rotation": 0,
                    },
                    "revisions": [
                        {
                            "version": "REV1",
                            "image": "101-arch-r1.png",
                            "date": "2024-01-10",
                            "description": "최초 설계",
                            "changes": [],
                        },
                        {
                            "version": "REV2",
                            "image": "101-arch-r2.png",
                            "date": "2024-03-05",
                            "description": "평면 변경",
                            "changes": ["벽체 이동"],
                        },
                    ],
                },
                "구조": {
                    "image": "101-str.png",
                    "imageTransform": {
                        "relativeTo": ARCH_REF,
                        "x": 5,
                        "y": 5,
                        "scale": 2,
                        "rotation": 0,
                    },
                    "regions": {
                        "A": {
                            "polygon": {
                                "vertices": [[10, 10], [50, 10], [50, 50]],
                                "polygonTransform": {"relativeTo": ARCH_REF},
                            },
                            "revisions": [
                                {
                                    "version": "A-R1",
                                    "image": "101-str-a1.png",
                                    "date": "2024-02-01",
                                    "imageTransform": {
                                        "relativeTo": ARCH_REF,
                                        "x": 10,
                                        "y": 20,
                                        "scale": 0.5,
                                        "rotation": 0.1,
                                    },
                                }
                            ],
                        },
                        "B": {
                            "revisions": [
                                {
                                    "version": "B-R1",
                                    "image": "101-str-b1.png",
                                    "date": "2024-02-02",
                                }
                            ]
                        },
                    },
                },
                "설비": {
                    "image": "101-mep.png",
                    "imageTransform": {"relativeTo": "other.png", "x": 3, "y": 4},
                    "revisions": [],
                },
            },
        },
        "02": {
            "id": "02",
            "name": "102동",
            "image": "102.png",
            "parent": "00",
            "position": {"vertices": [[50, 50], [150, 50], [150, 150], [50, 150]]},
            "disciplines": {
                "건축": {"revisions": [{"version": "R0", "date": "2023-12-01"}]},
            },
        },
        "10": {
            "id": "10",
            "name": "주차장",
            "image": "parking.png",
            "parent": "00",
        },
    },
}


@pytest.fixture
def payload():
    return copy.deepcopy(PAYLOAD)


@pytest.fixture
def metadata(payload):
    return Metadata.from_dict(payload)


@pytest.fixture
def metadata_file(tmp_path, payload):
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path
