"""Test module for strict_transcoder package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import strict_transcoder

    # Assert
    assert strict_transcoder is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import strict_transcoder

    # Assert
    assert isinstance(strict_transcoder.__version__, str)
    assert strict_transcoder.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import strict_transcoder

    # Assert
    assert strict_transcoder.__author__ == "Strict Transcoder Team"


def test_package_all_exports_resolve() -> None:
    """Test that every name in __all__ is importable from the package."""
    # Arrange & Act
    import strict_transcoder

    # Assert
    for name in strict_transcoder.__all__:
        assert hasattr(strict_transcoder, name), name


def test_top_level_round_trip() -> None:
    """Test the level 1 functions end to end."""
    # Arrange
    from strict_transcoder import CodeUnits, CodeUnitWidth, decode, encode, transcode

    # Act
    utf16 = transcode(CodeUnits.utf32([0x1F600]), CodeUnitWidth.UTF16)
    data = encode(utf16, "utf-8")

    # Assert
    assert utf16.units == (0xD83D, 0xDE00)
    assert data == b"\xf0\x9f\x98\x80"
    assert decode(data, "utf-8") == utf16
