from setuptools import setup, find_packages

setup(
    name="jeopardy-board",
    version="0.1.0",
    description="Browser trivia board built from a public Jeopardy clue API",
    author="Nils Brinkmann",
    packages=find_packages(include=["board_core", "board_core.*", "jeopardy_api", "jeopardy_api.*", "jeopardy_app", "jeopardy_app.*"]),
    include_package_data=True,
    package_data={
        "jeopardy_app": ["templates/jeopardy_app/*.html", "static/jeopardy_app/*"],
    },
    install_requires=[
        "Django>=4.2",
        "django-ninja>=1.0",
        "django-prometheus",
        "prometheus-client",
        "requests",
        "gunicorn",
        "opentelemetry-api",
        "opentelemetry-sdk",
        "opentelemetry-exporter-otlp-proto-grpc",
        "opentelemetry-instrumentation-django",
        "opentelemetry-instrumentation-logging",
        "opentelemetry-instrumentation-requests",
        "opentelemetry-instrumentation-sqlite3",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-django",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Framework :: Django",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
