import pytest

from omronfins.core import BodyTooShortError, ResponseError, Transport
from omronfins.directory import (
    DirectoryListing,
    Disk,
    create_directory,
    delete_directory,
    file_delete,
    file_memory_format,
    file_name_read,
    filename_to_83,
    valid_directory,
)

OK = b"\x00\x00"


class FakeLink(Transport):
    def __init__(self, response):
        self.response = response
        self.calls = []

    def exchange(self, mrc, src, body):
        self.calls.append((mrc, src, body))
        return self.response


def _stamp(year, month, day, hour, minute, second):
    value = (
        ((year - 1980) << 25)
        | (month << 21)
        | (day << 16)
        | (hour << 11)
        | (minute << 5)
        | (second // 2)
    )
    return value.to_bytes(4, "big")


def _disk_block(label, stamp, total, free, files):
    return (
        label.encode("latin-1").ljust(12, b"\0")
        + stamp
        + total.to_bytes(4, "big")
        + free.to_bytes(4, "big")
        + files.to_bytes(2, "big")
    )


def _file_record(name, stamp, size, attributes):
    return name.encode("latin-1").ljust(12, b"\0") + stamp + size.to_bytes(4, "big") + b"\x00" + bytes([attributes])


def test_filename_to_83_pads_name_and_extension():
    assert filename_to_83("DATA.BIN") == "DATA    .BIN"


@pytest.mark.parametrize("name", ["A.B", "ABCDEFGH.XYZ", "README", "x1.c"])
def test_filename_to_83_keeps_shape(name):
    result = filename_to_83(name)
    assert len(result) == 12
    assert result[8] == "."
    assert result[:8].rstrip() + ("." + result[9:].rstrip() if result[9:].strip() else "") == name


@pytest.mark.parametrize("name", ["", "TOOLONGNAME.TXT", "A.LONG", ".TXT", "A B.TXT", "A\\B.C"])
def test_filename_to_83_rejects_bad_names(name):
    with pytest.raises(ValueError):
        filename_to_83(name)


@pytest.mark.parametrize("path", [None, "", "\\", "\\DIR", "\\DIR\\SUB.D"])
def test_valid_directory_accepts(path):
    assert valid_directory(path) is True


@pytest.mark.parametrize("path", ["DIR", "\\DIR\\", "\\TOOLONGDIR", "\\" + "A\\" * 40 + "A"])
def test_valid_directory_rejects(path):
    assert valid_directory(path) is False


def test_file_memory_format_sends_disk_code():
    link = FakeLink(OK)
    file_memory_format(link, Disk.EM_FILE_MEMORY)
    assert link.calls == [(0x22, 0x04, int(Disk.EM_FILE_MEMORY).to_bytes(2, "big"))]


def test_file_memory_format_rejects_unknown_disk():
    link = FakeLink(OK)
    with pytest.raises(ValueError):
        file_memory_format(link, 0x1234)
    assert link.calls == []


def test_file_memory_format_checks_length():
    with pytest.raises(BodyTooShortError):
        file_memory_format(FakeLink(OK + b"\x00"), Disk.MEMORY_CARD)


def test_file_name_read_decodes_listing():
    disk_stamp = _stamp(2019, 5, 17, 13, 42, 30)
    file_stamp = _stamp(2001, 12, 31, 23, 59, 58)
    response = (
        OK
        + _disk_block("VOLUME", disk_stamp, 65536, 1024, 2)
        + (0x8001).to_bytes(2, "big")
        + _file_record("MAIN.OBJ", file_stamp, 4096, 0x21)
    )
    link = FakeLink(response)
    listing = file_name_read(link, Disk.MEMORY_CARD, "\\PRG", 0, 5)
    assert isinstance(listing, DirectoryListing)
    info = listing.disk_info
    assert info.volume_label == "VOLUME"
    assert (info.year, info.month, info.day, info.hour, info.minute, info.second) == (2019, 5, 17, 13, 42, 30)
    assert (info.total_capacity, info.free_capacity, info.total_files) == (65536, 1024, 2)
    assert len(listing.files) == 1
    entry = listing.files[0]
    assert entry.filename == "MAIN.OBJ"
    assert (entry.year, entry.month, entry.day, entry.hour, entry.minute, entry.second) == (2001, 12, 31, 23, 59, 58)
    assert entry.size == 4096
    assert entry.read_only and entry.archive
    assert not (entry.hidden or entry.system or entry.volume_label or entry.directory)
    mrc, src, body = link.calls[0]
    assert (mrc, src) == (0x22, 0x01)
    assert body == (
        int(Disk.MEMORY_CARD).to_bytes(2, "big")
        + (0).to_bytes(2, "big")
        + (5).to_bytes(2, "big")
        + (4).to_bytes(2, "big")
        + b"\\PRG"
    )


def test_file_name_read_with_no_files():
    response = OK + _disk_block("", _stamp(1980, 1, 1, 0, 0, 0), 0, 0, 0) + b"\x00\x00"
    listing = file_name_read(FakeLink(response), Disk.MEMORY_CARD)
    assert listing.files == []
    assert listing.disk_info.year == 1980
    assert listing.disk_info.volume_label == ""


def test_file_name_read_short_header():
    with pytest.raises(BodyTooShortError):
        file_name_read(FakeLink(OK + bytes(20)), Disk.MEMORY_CARD)


def test_file_name_read_missing_records():
    response = OK + _disk_block("V", _stamp(2000, 1, 1, 0, 0, 0), 0, 0, 0) + b"\x00\x02"
    with pytest.raises(BodyTooShortError):
        file_name_read(FakeLink(response), Disk.MEMORY_CARD, None, 0, 2)


def test_file_name_read_rejects_bad_path():
    link = FakeLink(OK)
    with pytest.raises(ValueError):
        file_name_read(link, Disk.MEMORY_CARD, "NOSLASH")
    assert link.calls == []


def test_file_name_read_reports_end_code():
    with pytest.raises(ResponseError) as info:
        file_name_read(FakeLink(b"\x11\x03"), Disk.MEMORY_CARD)
    assert info.value.end_code == 0x1103


def test_file_delete_sends_83_names_and_returns_count():
    link = FakeLink(OK + (2).to_bytes(2, "big"))
    deleted = file_delete(link, Disk.MEMORY_CARD, "\\D", ["A.TXT", "BB.DAT"])
    assert deleted == 2
    mrc, src, body = link.calls[0]
    assert (mrc, src) == (0x22, 0x05)
    assert body == (
        int(Disk.MEMORY_CARD).to_bytes(2, "big")
        + (2).to_bytes(2, "big")
        + filename_to_83("A.TXT").encode()
        + filename_to_83("BB.DAT").encode()
        + (2).to_bytes(2, "big")
        + b"\\D"
    )


def test_file_delete_with_no_names_sends_nothing():
    link = FakeLink(OK)
    assert file_delete(link, Disk.MEMORY_CARD, None, []) == 0
    assert link.calls == []


def test_file_delete_limits_count():
    link = FakeLink(OK)
    with pytest.raises(ValueError):
        file_delete(link, Disk.MEMORY_CARD, None, ["F.TXT"] * 101)
    assert link.calls == []


def test_file_delete_rejects_bad_name():
    with pytest.raises(ValueError):
        file_delete(FakeLink(OK + b"\x00\x01"), Disk.MEMORY_CARD, None, ["WAYTOOLONG.TXT"])


def test_file_delete_checks_length():
    with pytest.raises(BodyTooShortError):
        file_delete(FakeLink(OK), Disk.MEMORY_CARD, None, ["A.TXT"])


@pytest.mark.parametrize("func, mode", [(create_directory, 0), (delete_directory, 1)])
def test_directory_commands_send_mode(func, mode):
    link = FakeLink(OK)
    func(link, Disk.EM_FILE_MEMORY, None, "LOGS")
    mrc, src, body = link.calls[0]
    assert (mrc, src) == (0x22, 0x15)
    assert body[2:4] == mode.to_bytes(2, "big")
    assert body[4:16] == filename_to_83("LOGS").encode()
    assert body[16:] == b"\x00\x00"


def test_directory_command_rejects_missing_name():
    with pytest.raises(ValueError):
        create_directory(FakeLink(OK), Disk.MEMORY_CARD, None, None)


def test_directory_command_checks_length():
    with pytest.raises(BodyTooShortError):
        delete_directory(FakeLink(OK + b"\x00"), Disk.MEMORY_CARD, "\\", "OLD")