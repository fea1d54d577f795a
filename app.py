#!/usr/bin/env python3
# app.py
import aws_cdk as cdk
from aws_cdk import Aspects
from cdk_nag import AwsSolutionsChecks

from infra_cdk.photo_album_stack import PhotoAlbumStack

app = cdk.App()
PhotoAlbumStack(app, "EDAAppStack")

# Run with `cdk synth -c nag=true` to check the stack against AWS Solutions rules.
if app.node.try_get_context("nag"):
    Aspects.of(app).add(AwsSolutionsChecks(verbose=True))

app.synth()
