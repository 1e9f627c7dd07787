#!/usr/bin/env python3
#
# Copyright (c) 2020-2021 Tatu Ylonen.  See LICENSE and https://ylonen.org

from setuptools import setup

with open("README.md", "r") as f:
    long_description = f.read()

setup(name="orgwiki",
      version="0.1.0",
      description="Parser and XML/HTML writers for a line-oriented wiki markup",
      long_description=long_description,
      long_description_content_type="text/markdown",
      author="Tatu Ylonen",
      author_email="ylo@clausal.com",
      license="MIT",
      scripts=[],
      packages=["orgwiki"],
      package_dir={"": "src"},
      python_requires=">=3.9",
      install_requires=["lru-dict"],
      extras_require={"test": ["pytest"]},
      entry_points={"console_scripts": ["orgwiki=orgwiki.cli:main"]},
      keywords=[
          "wiki",
          "markup",
          "parser",
          "html",
          "xml",
      ],
      classifiers=[
          "Development Status :: 3 - Alpha",
          "Intended Audience :: Developers",
          "License :: OSI Approved :: MIT License",
          "Natural Language :: English",
          "Operating System :: POSIX :: Linux",
          "Programming Language :: Python",
          "Programming Language :: Python :: 3 :: Only",
          "Topic :: Text Processing",
          "Topic :: Text Processing :: Markup",
          ])
