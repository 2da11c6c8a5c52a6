"""
CLI Smoke Tests

Tests for the hashtree command line:
1. root prints the tree root of a file
2. layer prints one level of the tree
3. verify exits 0 on match, 2 on mismatch, 1 on bad input
4. proof prints a proof that verifies
5. config creates and shows configuration
"""
import json

import pytest

from hashtree.crypto.block_hashing import hash_bytes_blocks
from hashtree.crypto.hashing import from_hex, sha256, to_hex
from hashtree.merkle.hash_tree import build_tree
from hashtree.merkle.merkle_proofs import MerkleProof, verify_merkle_proof
from hashtree_cli.commands.tree import tree_for_file
from hashtree_cli.commands.verify import verify_file
from hashtree_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    main,
)


# 3 blocks at the default 16 KiB block size
CONTENT = bytes(i % 251 for i in range(40000))


@pytest.fixture
def content_file(clean_env, restore_logging):
    path = clean_env / "content.bin"
    path.write_bytes(CONTENT)
    return path


@pytest.fixture
def content_root():
    return build_tree(hash_bytes_blocks(CONTENT)).root()


def run_json(capsys, argv):
    code = main(argv)
    return code, json.loads(capsys.readouterr().out)


class TestRootCommand:

    def test_root_json(self, content_file, content_root, capsys):
        code, data = run_json(capsys, ["root", str(content_file), "--json"])

        assert code == EXIT_SUCCESS
        assert data["root"] == to_hex(content_root)
        assert data["num_blocks"] == 3
        assert data["num_leaves"] == 4
        assert data["num_levels"] == 2
        assert "hashes" not in data

    def test_root_human(self, content_file, content_root, capsys):
        assert main(["root", str(content_file)]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert f"root: {to_hex(content_root)}" in out
        assert "blocks: 3" in out

    def test_block_size_option(self, content_file, capsys):
        code, data = run_json(capsys, ["root", str(content_file), "-b", "1024", "--json"])

        assert code == EXIT_SUCCESS
        assert data["num_blocks"] == 40
        assert data["num_leaves"] == 64

    def test_block_size_from_env(self, content_file, monkeypatch, capsys):
        monkeypatch.setenv("HASHTREE_BLOCK_SIZE", "1024")

        code, data = run_json(capsys, ["root", str(content_file), "--json"])

        assert code == EXIT_SUCCESS
        assert data["block_size"] == 1024
        assert data["num_blocks"] == 40

    def test_missing_file(self, clean_env, restore_logging, capsys):
        assert main(["root", str(clean_env / "missing.bin")]) == EXIT_RUNTIME_ERROR
        assert "File not found" in capsys.readouterr().err


class TestLayerCommand:

    def test_layer_one(self, content_file, capsys):
        code, data = run_json(capsys, ["layer", str(content_file), "--level", "1", "--json"])

        leaves = hash_bytes_blocks(CONTENT)
        assert code == EXIT_SUCCESS
        assert data["level"] == 1
        assert data["hashes"] == [to_hex(h) for h in build_tree(leaves).level(1)]
        assert len(data["hashes"]) == 2

    def test_layer_out_of_range(self, content_file, capsys):
        assert main(["layer", str(content_file), "--level", "5"]) == EXIT_RUNTIME_ERROR


class TestVerifyCommand:

    def test_verify_match(self, content_file, content_root, capsys):
        code, data = run_json(
            capsys, ["verify", str(content_file), "--root", to_hex(content_root), "--json"]
        )

        assert code == EXIT_SUCCESS
        assert data["ok"] is True
        assert data["actual_root"] == to_hex(content_root)

    def test_verify_mismatch(self, content_file, content_root, capsys):
        wrong = to_hex(sha256(b"not the root"))

        code, data = run_json(capsys, ["verify", str(content_file), "--root", wrong, "--json"])

        assert code == EXIT_VERIFICATION_FAILED
        assert data["ok"] is False
        assert data["expected_root"] == wrong
        assert data["actual_root"] == to_hex(content_root)
        assert data["errors"]

    @pytest.mark.parametrize("root", ["deadbeef", "0xzz", "0xdeadbeef"])
    def test_verify_bad_root(self, content_file, root, capsys):
        assert main(["verify", str(content_file), "--root", root]) == EXIT_RUNTIME_ERROR

    def test_verify_missing_file(self, clean_env, restore_logging, content_root):
        argv = ["verify", str(clean_env / "missing.bin"), "--root", to_hex(content_root)]

        assert main(argv) == EXIT_RUNTIME_ERROR


class TestProofCommand:

    def test_proof_json_verifies(self, content_file, content_root, capsys):
        code, data = run_json(capsys, ["proof", str(content_file), "--leaf", "2", "--json"])

        assert code == EXIT_SUCCESS
        proof = MerkleProof(
            leaf=from_hex(data["leaf"]),
            index=data["index"],
            siblings=[from_hex(s) for s in data["siblings"]],
            root=from_hex(data["root"]),
        )
        assert proof.root == content_root
        assert verify_merkle_proof(proof)

    def test_proof_out_of_range(self, content_file, capsys):
        assert main(["proof", str(content_file), "--leaf", "9"]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:

    def test_init_then_refuse_overwrite(self, clean_env, restore_logging):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (clean_env / "hashtree.yaml").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

    def test_show(self, clean_env, restore_logging, capsys):
        code, data = run_json(capsys, ["config", "--show"])

        assert code == EXIT_SUCCESS
        assert data["hashing"]["block_size"] == 16384

    def test_missing_config_file(self, clean_env, restore_logging):
        argv = ["--config", str(clean_env / "nope.yaml"), "config", "--show"]

        assert main(argv) == EXIT_RUNTIME_ERROR

    def test_no_command_prints_help(self, clean_env, restore_logging, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR
        assert "usage" in capsys.readouterr().out


class Prefixed:
    """Combiner that domain-separates interior nodes."""

    def combine(self, left, right):
        return sha256(b"\x01" + left + right)

    def padding_hash(self, level):
        padding = bytes(32)
        for _ in range(level):
            padding = self.combine(padding, padding)
        return padding


class TestCombinerWiring:
    """Commands build trees with the combiner they are given."""

    def test_tree_for_file_uses_combiner(self, content_file, content_root):
        leaves, tree = tree_for_file(content_file, 16384, Prefixed())

        assert tree.root() == build_tree(leaves, Prefixed()).root()
        assert tree.root() != content_root

    def test_verify_file_uses_combiner(self, content_file):
        leaves = hash_bytes_blocks(CONTENT)
        root = build_tree(leaves, Prefixed()).root()

        assert verify_file(content_file, root, 16384, Prefixed()).ok
        assert not verify_file(content_file, root, 16384).ok
