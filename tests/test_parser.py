from store_crawler.products import (
    PRICE_NOT_AVAILABLE,
    ProductInfo,
    ProductParser,
    render_digest_entry,
)

URL = "https://store.ui.com/us/products/widget"


def parse(html, **kwargs):
    return ProductParser(**kwargs).extract_product_info(html, URL)


def test_bare_markup_yields_fallbacks():
    product = parse("<html><head><title>Dream Machine | Ubiquiti Store</title></head><body><p>hi</p></body></html>")
    assert product.name == "Dream Machine"
    assert product.price == PRICE_NOT_AVAILABLE
    assert product.description == ""
    assert product.features == []
    assert product.specifications == {}
    assert product.url == URL


def test_missing_title_gives_placeholder_name():
    assert parse("<html><body></body></html>").name == "Unknown Product"
    assert parse("<html><head><title> - Ubiquiti</title></head></html>").name == "Unknown Product"


def test_title_suffix_pattern_is_configurable():
    html = "<title>Flex Mini — Acme Shop</title>"
    assert parse(html, title_suffix_pattern=r"\s*—\s*Acme.*$").name == "Flex Mini"


def test_name_cascade_prefers_specific_selectors():
    html = """
    <h1>Generic heading</h1>
    <h1 class="product-name">  </h1>
    <h1 class="product_title">U6 Pro</h1>
    """
    assert parse(html).name == "U6 Pro"


def test_description_cascade_and_meta_fallback():
    html = '<meta name="description" content=" From meta "><div class="product__description">Body text</div>'
    assert parse(html).description == "Body text"
    html = '<meta name="description" content=" From meta "><div class="product-description">   </div>'
    assert parse(html).description == "From meta"


def test_price_cascade_uses_first_match_and_meta():
    html = '<span class="price">$99</span><span class="price">$199</span>'
    assert parse(html).price == "$99"
    html = '<meta property="product:price:amount" content="379.00"><span data-product-price>$1</span>'
    assert parse(html).price == "379.00"
    assert parse("<span data-product-price> $5 </span>").price == "$5"


def test_spec_table_skips_blank_rows():
    html = """
    <div class="specifications"><table>
      <tr><td>Key1</td><td>Val1</td></tr>
      <tr><td></td><td></td></tr>
      <tr><td>Key2</td><td>Val2</td></tr>
      <tr><td>Lonely</td></tr>
      <tr><th>Weight</th><td></td></tr>
    </table></div>
    """
    assert parse(html).specifications == {"Key1": "Val1", "Key2": "Val2"}


def test_first_productive_table_selector_wins_over_later_tables_and_dl():
    html = """
    <div class="product-specifications"><table><tr><td></td><td>x</td></tr></table></div>
    <div class="product-specs"><table><tr><th>Ports</th><td>8</td></tr></table></div>
    <table class="specifications"><tr><td>Ignored</td><td>yes</td></tr></table>
    <dl><dt>Also ignored</dt><dd>yes</dd></dl>
    """
    assert parse(html).specifications == {"Ports": "8"}


def test_definition_lists_are_the_fallback():
    html = """
    <dl><dt>Range</dt><dd>120 m</dd><dt>Band</dt><dd>5 GHz</dd></dl>
    <dl><dt>Power</dt><dd>PoE</dd><dt>Orphan</dt></dl>
    """
    assert parse(html).specifications == {"Range": "120 m", "Band": "5 GHz", "Power": "PoE"}


def test_features_do_not_merge_across_selectors():
    html = """
    <div class="product-features"><ul><li> </li></ul></div>
    <div class="features"><ul><li>Wi-Fi 6</li><li></li><li>PoE powered</li></ul></div>
    <ul class="product-highlights"><li>Not used</li></ul>
    """
    assert parse(html).features == ["Wi-Fi 6", "PoE powered"]


def test_markdown_full_section_order():
    product = ProductInfo(
        url=URL,
        name="Widget",
        description="Small and fast.",
        price="$99",
        features=["One", "Two"],
        specifications={"Ports": "8", "Weight": "1 kg"},
    )
    assert ProductParser.to_markdown(product) == (
        "# Widget\n\n"
        "**Price**: $99\n\n"
        "## Description\n\nSmall and fast.\n\n"
        "## Features\n\n- One\n- Two\n\n"
        "## Specifications\n\n- **Ports**: 8\n- **Weight**: 1 kg\n\n"
        f"**Product URL**: {URL}\n"
    )


def test_markdown_omits_empty_sections_and_placeholder_price():
    product = ProductInfo(url=URL, name="Widget")
    assert ProductParser.to_markdown(product) == f"# Widget\n\n**Product URL**: {URL}\n"


def test_digest_entry_layout():
    product = ProductInfo(url=URL, name="Widget", description="Desc", price="$99", features=["A", "B"])
    rule = "=" * 36
    assert render_digest_entry(product, "Other") == (
        f"\n{rule}\nOther - Widget\n{rule}\nDesc\n\nPrice: $99\n\n"
        f"Features:\n- A\n- B\n\nURL: {URL}\n{rule}\n"
    )
