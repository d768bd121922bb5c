"""Unit tests for collision-free output naming."""

from pikpix.core.batch.naming import name_for


class TestNameFor:
    """Test suite for output naming."""

    def test_unused_name_is_kept(self, temp_dir):
        target = name_for(str(temp_dir), "foo", "png")

        assert target.path == temp_dir / "foo.png"
        assert target.created_directory is False

    def test_existing_names_get_numeric_suffix(self, temp_dir):
        # Arrange
        (temp_dir / "foo.png").write_bytes(b"first")

        # Act
        second = name_for(str(temp_dir), "foo", "png")
        second.path.write_bytes(b"second")
        third = name_for(str(temp_dir), "foo", "png")

        # Assert
        assert second.path.name == "foo_1.png"
        assert third.path.name == "foo_2.png"

    def test_other_extensions_do_not_collide(self, temp_dir):
        (temp_dir / "foo.jpeg").write_bytes(b"jpeg")

        target = name_for(str(temp_dir), "foo", "png")

        assert target.path.name == "foo.png"

    def test_missing_directories_are_created(self, temp_dir):
        directory = temp_dir / "a" / "b" / "c"

        target = name_for(str(directory), "foo", "webp")

        assert directory.is_dir()
        assert target.created_directory is True
        assert target.path == directory / "foo.webp"
        assert not target.path.exists()
