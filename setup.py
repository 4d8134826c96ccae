import setuptools

with open("README.md") as fh:
    long_description = fh.read()

setuptools.setup(
    name="svg_visual_bbox",
    version="0.1.0",
    author="Shay Hill",
    author_email="shay_public@hotmail.com",
    description="Measure the visual bounding boxes of SVG elements by rendering them.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/ShayHill/svg_visual_bbox",
    package_dir={"": "src"},
    package_data={"svg_visual_bbox": ["py.typed"]},
    packages=setuptools.find_packages("src"),
    install_requires=[
        "lxml",
        "svg-path-data",
        "paragraphs",
        "Pillow",
        "cairosvg",
        "cairocffi",
        "svgelements",
    ],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
