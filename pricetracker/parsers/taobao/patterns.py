from __future__ import annotations

PARAMETERS_MARKER = "参数信息"
PRE_DISCOUNT_LABEL = "优惠前"
POST_COUPON_LABEL = "券后"
NEW_ARRIVAL_LABEL = "新品促销"
COIN_MARKER = "淘金币"

SNIFF_MARKERS = (PARAMETERS_MARKER, PRE_DISCOUNT_LABEL, COIN_MARKER)

PRICE_LABELS = (POST_COUPON_LABEL,)
ORIGINAL_PRICE_LABELS = (PRE_DISCOUNT_LABEL, NEW_ARRIVAL_LABEL)

# A section header such as 商品信息 or 店铺信息 closes the parameters block.
SECTION_SUFFIX = "信息"

BRAND_KEY = "品牌"

KNOWN_PARAMETER_KEYS = frozenset(
    {
        "品牌",
        "产地",
        "型号",
        "规格",
        "颜色分类",
        "材质",
        "款式",
        "货号",
        "大小",
        "适用年龄段",
        "功能",
        "包装",
        "包装规格",
        "系列",
        "省份",
        "城市",
        "规格描述",
        "是否进口",
        "总净含量",
        "生产许可证编号",
        "厂名",
        "厂址",
        "厂家联系方式",
        "配料表",
        "保质期",
        "净含量",
        "成分",
        "特性",
        "用途",
        "特殊添加成分",
        "适用对象",
        "流行元素",
        "风格",
        "元素年代",
        "套件种类",
        "适用空间",
        "个数",
        "适用场景",
        "适用群体",
        "单件净含量",
        "酒精度数",
        "香型",
        "包装方式",
        "售卖规格",
        "生产企业",
        "贴膜特点",
        "贴膜工艺",
        "适用手机型号",
        "适用品牌",
        "适用机型",
        "屏幕尺寸",
        "颜色",
        "容量",
        "版本",
        "套餐",
        "尺码",
        "重量",
        "产品名称",
        "适用性别",
        "适用季节",
        "生产日期",
        "产品标准号",
        "储藏方法",
        "食品添加剂",
        "套餐类型",
    }
)
