import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

PACKAGE_TYPES = [
    "alpm",
    "apk",
    "bitbucket",
    "bitnami",
    "cargo",
    "cocoapods",
    "composer",
    "conan",
    "conda",
    "cpan",
    "cran",
    "deb",
    "docker",
    "gem",
    "generic",
    "github",
    "golang",
    "hackage",
    "hex",
    "huggingface",
    "luarocks",
    "maven",
    "mlflow",
    "npm",
    "nuget",
    "oci",
    "pub",
    "pypi",
    "qpkg",
    "rpm",
    "swid",
    "swift",
]

IDENTIFIER_TYPES = [("cpe", "CPE"), ("tei", "TEI"), ("purl", "PURL"), ("swid", "SWID")]


def _entity_fields():
    return [
        ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
        ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
    ]


def _package_fields():
    return [
        ("name", models.CharField(max_length=255)),
        (
            "type",
            models.CharField(choices=[(t, t) for t in PACKAGE_TYPES], default="generic", max_length=32),
        ),
        ("namespace", models.CharField(blank=True, default="", max_length=255)),
        ("version", models.CharField(blank=True, max_length=255, null=True)),
        ("barcode", models.CharField(blank=True, max_length=255, null=True)),
        ("sku", models.CharField(blank=True, max_length=255, null=True)),
        ("subpath", models.CharField(blank=True, max_length=1024, null=True)),
        ("qualifiers", models.JSONField(blank=True, default=list)),
    ]


def _team_field():
    return ("team", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="teams.team"))


def _identifier_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("id_type", models.CharField(choices=IDENTIFIER_TYPES, max_length=8)),
        ("id_value", models.CharField(max_length=2048)),
        ("position", models.PositiveIntegerField(default=0)),
    ]


def _association_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("relationship", models.CharField(blank=True, max_length=64, null=True)),
        ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("teams", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="TeaProduct",
            fields=_entity_fields()
            + _package_fields()
            + [
                ("vendor_uuid", models.CharField(blank=True, max_length=255, null=True)),
                _team_field(),
            ],
            options={
                "db_table": "tea_products",
                "ordering": ["-created_at", "uuid"],
                "indexes": [models.Index(fields=["team", "created_at"], name="tea_prod_team_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="TeaComponent",
            fields=_entity_fields()
            + _package_fields()
            + [
                ("vendor", models.CharField(blank=True, max_length=255, null=True)),
                _team_field(),
            ],
            options={
                "db_table": "tea_components",
                "ordering": ["-created_at", "uuid"],
                "indexes": [models.Index(fields=["team", "created_at"], name="tea_comp_team_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="ProductIdentifier",
            fields=_identifier_fields()
            + [
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="identifier_rows",
                        to="tea.teaproduct",
                    ),
                ),
            ],
            options={
                "db_table": "tea_product_identifiers",
                "ordering": ["position", "id"],
                "indexes": [models.Index(fields=["id_type", "id_value"], name="tea_product_ident_idx")],
            },
        ),
        migrations.CreateModel(
            name="ComponentIdentifier",
            fields=_identifier_fields()
            + [
                (
                    "component",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="identifier_rows",
                        to="tea.teacomponent",
                    ),
                ),
            ],
            options={
                "db_table": "tea_component_identifiers",
                "ordering": ["position", "id"],
                "indexes": [models.Index(fields=["id_type", "id_value"], name="tea_component_ident_idx")],
            },
        ),
        migrations.CreateModel(
            name="TeaRelease",
            fields=_entity_fields()
            + [
                ("tag", models.CharField(max_length=255)),
                ("version", models.CharField(max_length=255)),
                ("name", models.CharField(blank=True, max_length=255, null=True)),
                ("description", models.TextField(blank=True, null=True)),
                ("release_date", models.DateTimeField()),
                ("valid_until_date", models.DateTimeField(blank=True, null=True)),
                ("prerelease", models.BooleanField(default=False)),
                ("draft", models.BooleanField(default=False)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="releases",
                        to="tea.teaproduct",
                    ),
                ),
                _team_field(),
            ],
            options={
                "db_table": "tea_releases",
                "ordering": ["-created_at", "uuid"],
                "indexes": [models.Index(fields=["team", "created_at"], name="tea_rel_team_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="TeaCollection",
            fields=_entity_fields()
            + [
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, null=True)),
                ("artifacts", models.JSONField(blank=True, default=list)),
                ("lifecycle", models.JSONField()),
                ("update_reason", models.JSONField()),
                _team_field(),
            ],
            options={
                "db_table": "tea_collections",
                "ordering": ["-created_at", "uuid"],
                "indexes": [models.Index(fields=["team", "created_at"], name="tea_coll_team_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="ProductComponent",
            fields=_association_fields()
            + [
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="component_links",
                        to="tea.teaproduct",
                    ),
                ),
                (
                    "component",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_links",
                        to="tea.teacomponent",
                    ),
                ),
            ],
            options={
                "db_table": "tea_product_components",
                "ordering": ["created_at", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("product", "component"), name="tea_unique_product_component")
                ],
            },
        ),
        migrations.CreateModel(
            name="ReleaseComponent",
            fields=_association_fields()
            + [
                (
                    "release",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="component_links",
                        to="tea.tearelease",
                    ),
                ),
                (
                    "component",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="release_links",
                        to="tea.teacomponent",
                    ),
                ),
            ],
            options={
                "db_table": "tea_release_components",
                "ordering": ["created_at", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("release", "component"), name="tea_unique_release_component")
                ],
            },
        ),
        migrations.CreateModel(
            name="CollectionProduct",
            fields=_association_fields()
            + [
                (
                    "collection",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_links",
                        to="tea.teacollection",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="collection_links",
                        to="tea.teaproduct",
                    ),
                ),
            ],
            options={
                "db_table": "tea_collection_products",
                "ordering": ["created_at", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("collection", "product"), name="tea_unique_collection_product")
                ],
            },
        ),
        migrations.AddField(
            model_name="teacollection",
            name="products",
            field=models.ManyToManyField(
                related_name="collections", through="tea.CollectionProduct", to="tea.teaproduct"
            ),
        ),
    ]
