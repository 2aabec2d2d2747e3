"""
biomigrate test suite
=====================

Test Modules
------------
- test_models.py: Enums, settings and the biome.json model
- test_detector.py: Root, legacy config and package manager detection
- test_manifest.py: package.json reading and rewriting
- test_generator.py: biome.json generation
- test_runner.py: Package manager commands
- test_migrator.py: The migration pipeline
- test_validator.py: SKILL.md validation
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_migrator.py

    # Run specific test class
    pytest tests/test_migrator.py::TestInstallFailure
"""
