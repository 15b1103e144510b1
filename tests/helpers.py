import os
import stat


def make_executable(directory, name, body="#!/bin/sh\nexit 0\n"):
    path = os.path.join(directory, name)
    with open(path, "w") as f:
        f.write(body)
    os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def make_plain_file(directory, name):
    path = os.path.join(directory, name)
    with open(path, "w") as f:
        f.write("data\n")
    os.chmod(path, 0o644)
    return path
