[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "srtlv"
version = "0.1.0"
description = "Decoders for BGP-LS and BGP Segment Routing TLVs: SRv6, SR Policy and TE Policy"
requires-python = ">=3.10"
dependencies = []
keywords = ["bgp", "bgp-ls", "segment-routing", "srv6", "sr-policy", "te-policy", "tlv", "parser"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["srtlv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
