import random
import string
from dockeryzer.DETECTORS.language_detector import detect_primary_language
from dockeryzer.DETECTORS.project_detector import ProjectTechnologyDetector
from dockeryzer.DETECTORS.version_classifier import classify
from dockeryzer.MODELS.image_metadata import ImageMetadata
from dockeryzer.MODELS.language_info import Runtime
from dockeryzer.MODELS.project_technology import FileTreeSnapshot
from dockeryzer.SECURITY.cis_analyzer import CISAnalyzer

ENV_KEYS = ["NODE_VERSION", "PYTHON_VERSION", "JAVA_VERSION", "JAVA_HOME", "GOLANG_VERSION", "GOPATH",
            "PHP_VERSION", "RUBY_VERSION", "DOTNET_VERSION", "RUST_VERSION", "CARGO_HOME", "PATH"]
INSTRUCTIONS = ["FROM", "RUN", "COPY", "USER", "EXPOSE", "HEALTHCHECK", "CMD", "from", "run"]


def random_string(length):
    return ''.join(random.choice(string.printable) for _ in range(length))


def test_fuzz_cis_analyzer(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    analyzer = CISAnalyzer()
    for _ in range(100):
        lines = [f"{random.choice(INSTRUCTIONS)} {random_string(random.randint(0, 40))}"
                 for _ in range(random.randint(0, 20))]
        results = analyzer.analyze("\n".join(lines) + random_string(random.randint(0, 100)))
        assert len(results) == 10
        for result in results:
            assert result.passed == (result.severity is None)


def test_fuzz_version_classifier():
    for _ in range(200):
        version = random_string(random.randint(0, 12))
        for runtime in Runtime:
            classify(runtime, version)


def test_fuzz_language_detector():
    for _ in range(200):
        env = [f"{random.choice(ENV_KEYS)}={random_string(random.randint(0, 20))}"
               for _ in range(random.randint(0, 5))]
        meta = ImageMetadata(
            env=env,
            cmd=[random_string(random.randint(0, 15))],
            entrypoint=random.choice([[], ["/app/" + random_string(5)]]),
            working_dir=random.choice(["", "/app", "/go/src/app"]),
            size=random.randint(0, 2 * 10 ** 9),
        )
        lang = detect_primary_language(meta)
        # Detection is pure
        assert lang == detect_primary_language(meta)


def test_fuzz_project_detector():
    detector = ProjectTechnologyDetector()
    names = ["package.json", "go.mod", "Cargo.toml", "composer.json", "Gemfile", "pom.xml", "app.py", "x.csproj"]
    for _ in range(100):
        root_files = random.sample(names, random.randint(0, len(names)))
        snapshot = FileTreeSnapshot(
            root_files=root_files,
            extension_counts={random.choice([".js", ".py", ".go", ".rs", ".txt"]): random.randint(0, 5)},
            config_files=root_files,
            manifests={name: random_string(random.randint(0, 200)) for name in root_files},
        )
        tech = detector.detect(snapshot)
        assert tech.language
